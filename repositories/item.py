from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush
from models.item import Item, ItemDTO


class ItemRepository:

    @staticmethod
    async def get_by_id(item_id: int, session: AsyncSession) -> ItemDTO | None:
        stmt = select(Item).where(Item.id == item_id)
        item = await session_execute(stmt, session)
        item = item.scalar()
        if item is None:
            return None
        return ItemDTO.model_validate(item, from_attributes=True)

    @staticmethod
    async def create(item_dto: ItemDTO, session: AsyncSession) -> int:
        item = Item(**item_dto.model_dump(exclude_none=True))
        session.add(item)
        await session_flush(session)
        return item.id

    @staticmethod
    async def update(item_dto: ItemDTO, session: AsyncSession) -> None:
        item_dto_dict = item_dto.model_dump(exclude={'id', 'user_id', 'created_at', 'updated_at'})
        none_keys = [k for k, v in item_dto_dict.items() if v is None]
        for k in none_keys:
            item_dto_dict.pop(k)
        if not item_dto_dict:
            return
        stmt = update(Item).where(Item.id == item_dto.id).values(**item_dto_dict)
        await session_execute(stmt, session)

    @staticmethod
    async def delete(item_id: int, session: AsyncSession) -> None:
        stmt = delete(Item).where(Item.id == item_id)
        await session_execute(stmt, session)
