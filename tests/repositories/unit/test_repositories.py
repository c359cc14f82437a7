"""
Tests for repositories and the db session helpers.
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from db import session_execute
from enums.currency import Currency
from enums.permission import Permission
from exceptions import StoreUnavailableException
from models.order import OrderDTO
from models.orderItem import OrderItemDTO
from repositories.cartItem import CartItemRepository
from repositories.order import OrderRepository
from repositories.user import UserRepository


def make_snapshot(user_id: int, title: str = "Dog Sweater", price: int = 1000, quantity: int = 1) -> OrderItemDTO:
    return OrderItemDTO(user_id=user_id, title=title, description="Warm", price=price,
                        image=None, large_image=None, quantity=quantity)


class TestSessionHelpers:

    @pytest.mark.asyncio
    async def test_operational_error_becomes_store_unavailable(self, test_session):
        with pytest.raises(StoreUnavailableException) as exc_info:
            await session_execute(text("SELECT * FROM missing_table"), test_session)

        assert exc_info.value.operation == "execute"
        assert exc_info.value.code == "STORE_UNAVAILABLE"


class TestOrderRepository:

    @pytest.mark.asyncio
    async def test_create_with_snapshots(self, test_session, make_user):
        user = await make_user()

        order = await OrderRepository.create(
            OrderDTO(user_id=user.id, total=2500, currency=Currency.USD, charge_id="ch_1"),
            [make_snapshot(user.id, quantity=2), make_snapshot(user.id, title="Bone", price=500)],
            test_session
        )

        assert order.id is not None
        assert order.created_at is not None
        assert sorted(order_item.title for order_item in order.items) == ["Bone", "Dog Sweater"]
        found = await OrderRepository.get_by_charge_id("ch_1", test_session)
        assert found.id == order.id
        assert await OrderRepository.get_by_charge_id("ch_unknown", test_session) is None

    @pytest.mark.asyncio
    async def test_charge_id_is_unique(self, test_session, make_user):
        user = await make_user()
        order_dto = OrderDTO(user_id=user.id, total=100, currency=Currency.USD, charge_id="ch_dup")
        await OrderRepository.create(order_dto, [make_snapshot(user.id)], test_session)

        with pytest.raises(IntegrityError):
            await OrderRepository.create(order_dto, [make_snapshot(user.id)], test_session)


class TestUserRepository:

    @pytest.mark.asyncio
    async def test_reset_token_expiry(self, test_session, make_user):
        user = await make_user()
        now = datetime(2026, 1, 1, 12, 0)
        await UserRepository.set_reset_token(user.id, "abc123", now + timedelta(hours=1), test_session)

        assert (await UserRepository.get_by_valid_reset_token("abc123", now, test_session)).id == user.id
        assert await UserRepository.get_by_valid_reset_token("abc123", now + timedelta(hours=2), test_session) is None

    @pytest.mark.asyncio
    async def test_set_password_clears_token(self, test_session, make_user):
        user = await make_user()
        now = datetime(2026, 1, 1, 12, 0)
        await UserRepository.set_reset_token(user.id, "abc123", now + timedelta(hours=1), test_session)

        await UserRepository.set_password(user.id, "new-hash", test_session)

        updated = await UserRepository.get_by_id(user.id, test_session)
        assert updated.password == "new-hash"
        assert updated.reset_token is None
        assert await UserRepository.get_by_valid_reset_token("abc123", now, test_session) is None

    @pytest.mark.asyncio
    async def test_set_permissions(self, test_session, make_user):
        user = await make_user()

        await UserRepository.set_permissions(user.id, [Permission.ADMIN, Permission.USER], test_session)

        assert (await UserRepository.get_by_id(user.id, test_session)).permissions == [Permission.ADMIN,
                                                                                      Permission.USER]


class TestCartItemRepository:

    @pytest.mark.asyncio
    async def test_increment_or_create(self, test_session, make_user, make_item):
        user = await make_user()
        item = await make_item(user.id)

        await CartItemRepository.increment_or_create(user.id, item.id, test_session)
        await CartItemRepository.increment_or_create(user.id, item.id, test_session)

        lines = await CartItemRepository.get_lines_by_user_id(user.id, test_session)
        assert [(line.item.id, line.quantity) for line in lines] == [(item.id, 2)]

    @pytest.mark.asyncio
    async def test_remove_purchased_keeps_unpaid_remainder(self, test_session, make_user, make_item):
        user = await make_user()
        sweater = await make_item(user.id)
        bone = await make_item(user.id, title="Bone", price=200)
        await CartItemRepository.increment_or_create(user.id, sweater.id, test_session)
        await CartItemRepository.increment_or_create(user.id, bone.id, test_session)
        captured = await CartItemRepository.get_lines_by_user_id(user.id, test_session)

        # Added while the charge was running
        await CartItemRepository.increment_or_create(user.id, sweater.id, test_session)

        deleted = await CartItemRepository.remove_purchased(captured, user.id, test_session)

        lines = await CartItemRepository.get_lines_by_user_id(user.id, test_session)
        assert deleted == 1
        assert [(line.item.id, line.quantity) for line in lines] == [(sweater.id, 1)]
