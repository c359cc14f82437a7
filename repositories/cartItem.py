from sqlalchemy import select, update, delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute
from models.cartItem import CartItem, CartItemDTO, CartLineDTO
from models.item import Item, ItemDTO


class CartItemRepository:

    @staticmethod
    async def get_by_id(cart_item_id: int, session: AsyncSession) -> CartItemDTO | None:
        stmt = select(CartItem).where(CartItem.id == cart_item_id).execution_options(populate_existing=True)
        cart_item = await session_execute(stmt, session)
        cart_item = cart_item.scalar()
        if cart_item is None:
            return None
        return CartItemDTO.model_validate(cart_item, from_attributes=True)

    @staticmethod
    async def get_by_user_and_item(user_id: int, item_id: int, session: AsyncSession) -> CartItemDTO | None:
        stmt = (select(CartItem)
                .where(CartItem.user_id == user_id, CartItem.item_id == item_id)
                .execution_options(populate_existing=True))
        cart_item = await session_execute(stmt, session)
        cart_item = cart_item.scalar()
        if cart_item is None:
            return None
        return CartItemDTO.model_validate(cart_item, from_attributes=True)

    @staticmethod
    async def get_lines_by_user_id(user_id: int, session: AsyncSession) -> list[CartLineDTO]:
        """
        Get the user's cart lines joined with their items (single query).

        Args:
            user_id: Owner of the cart
            session: Database session

        Returns:
            List of CartLineDTO ordered by cart line id
        """
        stmt = (select(CartItem, Item)
                .join(Item, CartItem.item_id == Item.id)
                .where(CartItem.user_id == user_id)
                .order_by(CartItem.id)
                # quantities change through upserts that bypass the identity map
                .execution_options(populate_existing=True))
        result = await session_execute(stmt, session)
        return [
            CartLineDTO(
                id=cart_item.id,
                user_id=cart_item.user_id,
                quantity=cart_item.quantity,
                item=ItemDTO.model_validate(item, from_attributes=True)
            )
            for cart_item, item in result.all()
        ]

    @staticmethod
    async def increment_or_create(user_id: int, item_id: int, session: AsyncSession) -> None:
        """
        Insert a cart line with quantity 1 or add 1 to the existing line.

        Runs as a single INSERT ... ON CONFLICT DO UPDATE against the
        (user_id, item_id) unique constraint, so two concurrent adds for the
        same pair both count.
        """
        dialect_name = session.bind.dialect.name if session.bind is not None else "sqlite"
        if dialect_name == "postgresql":
            insert = postgresql.insert
        else:
            insert = sqlite.insert
        stmt = insert(CartItem).values(user_id=user_id, item_id=item_id, quantity=1)
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "item_id"],
            set_={"quantity": CartItem.quantity + 1}
        )
        await session_execute(stmt, session)

    @staticmethod
    async def delete_by_id(cart_item_id: int, session: AsyncSession) -> None:
        stmt = delete(CartItem).where(CartItem.id == cart_item_id)
        await session_execute(stmt, session)

    @staticmethod
    async def remove_purchased(lines: list[CartLineDTO], user_id: int, session: AsyncSession) -> int:
        """
        Take the purchased quantities out of the user's cart.

        Lines are matched by the ids captured before the charge. A line whose
        quantity grew in the meantime keeps the unpaid remainder; every other
        captured line is deleted. Lines created after the capture are never
        touched.

        Returns:
            Number of deleted rows
        """
        deleted = 0
        for line in lines:
            stmt = delete(CartItem).where(CartItem.id == line.id,
                                          CartItem.user_id == user_id,
                                          CartItem.quantity <= line.quantity)
            result = await session_execute(stmt, session)
            deleted += result.rowcount
            stmt = (update(CartItem)
                    .where(CartItem.id == line.id,
                           CartItem.user_id == user_id,
                           CartItem.quantity > line.quantity)
                    .values(quantity=CartItem.quantity - line.quantity))
            await session_execute(stmt, session)
        return deleted
