"""
Checkout orchestration.

Turns the caller's cart into a paid order:

    lock -> read cart -> total -> charge (once) -> order + snapshots + cart cleanup (one transaction) -> unlock

The charge is the point of no return. Anything that fails before it leaves
no trace; anything that fails after it is recorded for reconciliation and
reported as InconsistentOrderException.
"""

import asyncio
import logging
from typing import Callable

import config
from db import get_db_session
from enums.currency import Currency
from exceptions import (
    UnauthenticatedException,
    EmptyCartException,
    InvalidPriceException,
    InconsistentOrderException,
)
from models.cartItem import CartLineDTO
from models.order import OrderDTO
from models.orderItem import OrderItemDTO
from models.payment import ChargeDTO
from repositories.cartItem import CartItemRepository
from repositories.order import OrderRepository
from utils.checkout_lock import CheckoutLock
from utils.reconciliation import ReconciliationLog
from utils.transaction_manager import TransactionManager

logger = logging.getLogger(__name__)


def calculate_cart_total(lines: list[CartLineDTO]) -> int:
    """
    Sum of price * quantity over all cart lines, in minor units.

    Integer arithmetic only, so the amount charged is exactly the sum of
    the line amounts.

    Raises:
        InvalidPriceException: A line carries a non-integer or negative price
    """
    total = 0
    for line in lines:
        price = line.item.price
        if not isinstance(price, int) or isinstance(price, bool) or price < 0:
            raise InvalidPriceException(price, line.item.id)
        total += price * line.quantity
    return total


def snapshot_cart_line(line: CartLineDTO) -> OrderItemDTO:
    return OrderItemDTO(
        user_id=line.user_id,
        title=line.item.title,
        description=line.item.description,
        price=line.item.price,
        image=line.item.image,
        large_image=line.item.large_image,
        quantity=line.quantity
    )


class CheckoutService:
    """
    Checkout entry point behind the createOrder mutation.

    Collaborators are injected so the gateway, the Redis lock and the
    session factory can be replaced in tests.

    Args:
        gateway: Object with ``async create_charge(amount, currency, token, description=None) -> ChargeDTO``
        checkout_lock: Per-user lock
        reconciliation_log: Where captured charges without an order are recorded
        session_factory: Callable returning an async session context manager
        currency: Currency every charge is made in
    """

    def __init__(self,
                 gateway,
                 checkout_lock: CheckoutLock,
                 reconciliation_log: ReconciliationLog,
                 session_factory: Callable | None = None,
                 currency: Currency | None = None):
        self.gateway = gateway
        self.checkout_lock = checkout_lock
        self.reconciliation_log = reconciliation_log
        self.session_factory = session_factory or get_db_session
        self.currency = currency or config.CURRENCY

    async def checkout(self, user_id: int | None, payment_token: str) -> OrderDTO:
        if not user_id:
            raise UnauthenticatedException("complete this order")

        async with self.checkout_lock.hold(user_id):
            async with self.session_factory() as session:
                lines = await CartItemRepository.get_lines_by_user_id(user_id, session)
            if not lines:
                raise EmptyCartException(user_id)

            amount = calculate_cart_total(lines)
            cart_item_ids = [line.id for line in lines]
            logger.info(f"Checkout for user {user_id}: {len(lines)} cart lines, total {amount} {self.currency.value}")

            charge = await self.gateway.create_charge(
                amount,
                self.currency,
                payment_token,
                description=f"Order of user {user_id}"
            )
            if charge.amount != amount:
                logger.warning(
                    f"Charge {charge.id} confirmed {charge.amount} but cart total was {amount} "
                    f"(user {user_id}), recording the confirmed amount"
                )

            try:
                order = await self._persist_order(user_id, charge, lines)
            except BaseException as e:
                # Cancellation included, the charge is already captured
                await asyncio.shield(self.reconciliation_log.record(
                    user_id=user_id,
                    charge_id=charge.id,
                    amount=charge.amount,
                    currency=self.currency.value,
                    cart_item_ids=cart_item_ids,
                    reason=f"{type(e).__name__}: {e}"
                ))
                if not isinstance(e, Exception):
                    raise
                raise InconsistentOrderException(user_id, charge.id, charge.amount, str(e)) from e

        logger.info(f"✅ Order {order.id} created for user {user_id} (charge {charge.id}, {order.total} {self.currency.value})")
        return order

    async def _persist_order(self, user_id: int, charge: ChargeDTO, lines: list[CartLineDTO]) -> OrderDTO:
        """
        Write the order, its item snapshots and remove the purchased cart lines atomically.

        Idempotent per charge id: a second call for the same charge returns the
        existing order and writes nothing.
        """
        async with TransactionManager.atomic_transaction(self.session_factory) as session:
            existing_order = await OrderRepository.get_by_charge_id(charge.id, session)
            if existing_order is not None:
                logger.warning(f"Order {existing_order.id} already exists for charge {charge.id}")
                return existing_order

            order = await OrderRepository.create(
                OrderDTO(user_id=user_id, total=charge.amount, currency=self.currency, charge_id=charge.id),
                [snapshot_cart_line(line) for line in lines],
                session
            )
            # Only what was paid for; lines added meanwhile stay in the cart
            deleted = await CartItemRepository.remove_purchased(lines, user_id, session)
            if deleted != len(lines):
                logger.info(f"{len(lines) - deleted} cart lines of user {user_id} changed during checkout")
            return order
