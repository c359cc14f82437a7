from pydantic import BaseModel
from sqlalchemy import Column, Integer, ForeignKey, CheckConstraint, UniqueConstraint

from models.base import Base
from models.item import ItemDTO


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False)
    item_id = Column(Integer, ForeignKey('items.id', ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        CheckConstraint('quantity > 0', name='check_quantity_positive'),
        # One line per (user, item): repeated adds increment quantity
        UniqueConstraint('user_id', 'item_id', name='uq_cart_items_user_item'),
    )


class CartItemDTO(BaseModel):
    id: int | None = None
    user_id: int | None = None
    item_id: int | None = None
    quantity: int | None = None


class CartLineDTO(BaseModel):
    """Cart line joined with the live item it points at."""
    id: int
    user_id: int
    quantity: int
    item: ItemDTO
