import logging

from sqlalchemy.ext.asyncio import AsyncSession

from db import session_commit
from enums.permission import Permission
from exceptions import (
    ForbiddenException,
    ItemNotFoundException,
    InvalidPriceException,
    ValidationException,
)
from models.item import ItemDTO
from repositories.item import ItemRepository
from services.user import UserService
from utils.permission_utils import owns_or_has_any

ITEM_UPDATE_PERMISSIONS = [Permission.ADMIN, Permission.ITEMUPDATE]
ITEM_DELETE_PERMISSIONS = [Permission.ADMIN, Permission.ITEMDELETE]


def validate_price(price, item_id: int | None = None) -> int:
    # bool is an int subclass but never a price
    if not isinstance(price, int) or isinstance(price, bool) or price <= 0:
        raise InvalidPriceException(price, item_id)
    return price


class ItemService:

    @staticmethod
    async def create_item(user_id: int | None, item_dto: ItemDTO, session: AsyncSession) -> ItemDTO:
        user = await UserService.get_signed_in_user(user_id, session, "create an item")
        if not item_dto.title or not item_dto.description:
            raise ValidationException("An item needs a title and a description")
        validate_price(item_dto.price)
        item_dto = item_dto.model_copy(update={'id': None, 'user_id': user.id})
        item_id = await ItemRepository.create(item_dto, session)
        await session_commit(session)
        logging.info(f"Item {item_id} created by user {user.id}")
        return await ItemRepository.get_by_id(item_id, session)

    @staticmethod
    async def update_item(user_id: int | None, item_dto: ItemDTO, session: AsyncSession) -> ItemDTO:
        """
        Partially update an item. Fields left as None are not touched.

        Allowed for the owner and for ADMIN / ITEMUPDATE holders.
        """
        user = await UserService.get_signed_in_user(user_id, session, "update an item")
        item = await ItemRepository.get_by_id(item_dto.id, session)
        if item is None:
            raise ItemNotFoundException(item_dto.id)
        if not owns_or_has_any(user, item.user_id, ITEM_UPDATE_PERMISSIONS):
            raise ForbiddenException(user.id, reason="You don't have permission to update this item")
        if item_dto.price is not None:
            validate_price(item_dto.price, item.id)
        if item_dto.title == "" or item_dto.description == "":
            raise ValidationException("Title and description cannot be empty")

        await ItemRepository.update(item_dto, session)
        await session_commit(session)
        logging.info(f"Item {item.id} updated by user {user.id}")
        return await ItemRepository.get_by_id(item.id, session)

    @staticmethod
    async def delete_item(user_id: int | None, item_id: int, session: AsyncSession) -> ItemDTO:
        """
        Delete an item and return it as it was before deletion.

        Allowed for the owner and for ADMIN / ITEMDELETE holders. Cart lines
        pointing at the item go with it; order snapshots stay.
        """
        user = await UserService.get_signed_in_user(user_id, session, "delete an item")
        item = await ItemRepository.get_by_id(item_id, session)
        if item is None:
            raise ItemNotFoundException(item_id)
        if not owns_or_has_any(user, item.user_id, ITEM_DELETE_PERMISSIONS):
            raise ForbiddenException(user.id, reason="You don't have permission to delete this item")

        await ItemRepository.delete(item_id, session)
        await session_commit(session)
        logging.info(f"Item {item_id} deleted by user {user.id}")
        return item
