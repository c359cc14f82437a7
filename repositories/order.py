from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush, session_refresh
from models.order import Order, OrderDTO
from models.orderItem import OrderItem, OrderItemDTO


class OrderRepository:
    @staticmethod
    async def create(order_dto: OrderDTO, order_items: list[OrderItemDTO], session: AsyncSession) -> OrderDTO:
        order = Order(**order_dto.model_dump(exclude={'id', 'items', 'created_at'}, exclude_none=True))
        order.items = [OrderItem(**order_item.model_dump(exclude={'id', 'order_id'}, exclude_none=True))
                       for order_item in order_items]
        session.add(order)
        await session_flush(session)
        # created_at is generated by the database
        await session_refresh(session, order)
        return OrderDTO.model_validate(order, from_attributes=True)

    @staticmethod
    async def get_by_id(order_id: int, session: AsyncSession) -> OrderDTO | None:
        stmt = select(Order).where(Order.id == order_id)
        order = await session_execute(stmt, session)
        order = order.scalar()
        if order is not None:
            return OrderDTO.model_validate(order, from_attributes=True)
        else:
            return None

    @staticmethod
    async def get_by_charge_id(charge_id: str, session: AsyncSession) -> OrderDTO | None:
        stmt = select(Order).where(Order.charge_id == charge_id)
        order = await session_execute(stmt, session)
        order = order.scalar()
        if order is not None:
            return OrderDTO.model_validate(order, from_attributes=True)
        else:
            return None

    @staticmethod
    async def get_by_user_id(user_id: int, session: AsyncSession) -> list[OrderDTO]:
        stmt = select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc(), Order.id.desc())
        orders = await session_execute(stmt, session)
        return [OrderDTO.model_validate(order, from_attributes=True) for order in orders.scalars().all()]
