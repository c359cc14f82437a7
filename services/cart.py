import logging

from sqlalchemy.ext.asyncio import AsyncSession

from db import session_commit
from exceptions import ItemNotFoundException, CartItemNotFoundException
from models.cartItem import CartItemDTO, CartLineDTO
from repositories.cartItem import CartItemRepository
from repositories.item import ItemRepository
from services.user import UserService


class CartService:

    @staticmethod
    async def add_to_cart(user_id: int | None, item_id: int, session: AsyncSession) -> CartLineDTO:
        """
        Add one unit of an item to the caller's cart.

        A second add of the same item increments the existing line in the
        database, so concurrent adds are never lost.
        """
        user = await UserService.get_signed_in_user(user_id, session, "add to your cart")
        if await ItemRepository.get_by_id(item_id, session) is None:
            raise ItemNotFoundException(item_id)

        await CartItemRepository.increment_or_create(user.id, item_id, session)
        await session_commit(session)

        cart_item = await CartItemRepository.get_by_user_and_item(user.id, item_id, session)
        logging.info(f"User {user.id} cart: item {item_id} quantity now {cart_item.quantity}")
        lines = await CartItemRepository.get_lines_by_user_id(user.id, session)
        return next(line for line in lines if line.id == cart_item.id)

    @staticmethod
    async def remove_from_cart(user_id: int | None, cart_item_id: int, session: AsyncSession) -> CartItemDTO:
        """
        Delete one cart line of the caller.

        A line that does not exist and a line of another user look the same
        to the caller.
        """
        user = await UserService.get_signed_in_user(user_id, session, "remove from your cart")
        cart_item = await CartItemRepository.get_by_id(cart_item_id, session)
        if cart_item is None or cart_item.user_id != user.id:
            raise CartItemNotFoundException(cart_item_id)

        await CartItemRepository.delete_by_id(cart_item.id, session)
        await session_commit(session)
        logging.info(f"User {user.id} removed cart item {cart_item.id}")
        return cart_item

    @staticmethod
    async def get_cart(user_id: int, session: AsyncSession) -> list[CartLineDTO]:
        return await CartItemRepository.get_lines_by_user_id(user_id, session)
