from datetime import datetime

from pydantic import BaseModel
from sqlalchemy import Column, Integer, DateTime, ForeignKey, String, func, CheckConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship

from enums.currency import Currency
from models.base import Base
from models.orderItem import OrderItemDTO


class Order(Base):
    __tablename__ = 'orders'

    id = Column(Integer, primary_key=True, unique=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    # Gateway-confirmed amount in minor units, never the client's figure
    total = Column(Integer, nullable=False)
    currency = Column(SQLEnum(Currency), nullable=False)
    # Unique so that a replayed persistence step cannot create a second order
    charge_id = Column(String, nullable=False, unique=True)
    created_at = Column(DateTime, default=func.now())

    user = relationship('User', backref='orders')
    items = relationship('OrderItem', back_populates='order', cascade='all, delete-orphan', lazy='selectin')

    __table_args__ = (
        CheckConstraint('total >= 0', name='check_order_total_non_negative'),
    )


class OrderDTO(BaseModel):
    id: int | None = None
    user_id: int | None = None
    total: int | None = None
    currency: Currency | None = None
    charge_id: str | None = None
    created_at: datetime | None = None
    items: list[OrderItemDTO] = []
