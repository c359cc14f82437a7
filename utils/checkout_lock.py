"""
Per-user checkout lock.

Serializes checkouts of the same user across API processes with a Redis key
``checkout:lock:<user_id>`` set via ``SET NX EX``. The value is a random owner
token so that a checkout whose lock already expired cannot release the lock
of the next one.

Unlike the rate limiter this lock fails closed: if Redis cannot be reached the
checkout is refused instead of risking a double charge.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from redis.asyncio import Redis
from redis.exceptions import RedisError

import config
from exceptions import CheckoutInProgressException, StoreUnavailableException

logger = logging.getLogger(__name__)


class CheckoutLock:

    def __init__(self, redis: Redis, timeout_seconds: int | None = None):
        self.redis = redis
        self.timeout_seconds = timeout_seconds or config.CHECKOUT_LOCK_TIMEOUT_SECONDS

    @staticmethod
    def _key(user_id: int) -> str:
        return f"checkout:lock:{user_id}"

    async def acquire(self, user_id: int) -> str | None:
        """
        Try to take the lock.

        Returns:
            Owner token if acquired, None if another checkout holds it

        Raises:
            StoreUnavailableException: Redis is unreachable
        """
        owner = uuid.uuid4().hex
        try:
            acquired = await self.redis.set(self._key(user_id), owner, nx=True, ex=self.timeout_seconds)
        except RedisError as e:
            logger.error(f"Checkout lock unavailable for user {user_id}: {e}")
            raise StoreUnavailableException(operation="checkout_lock", reason=str(e)) from e
        return owner if acquired else None

    async def release(self, user_id: int, owner: str) -> bool:
        """
        Release the lock if it is still ours.

        Returns:
            True if the lock was deleted
        """
        key = self._key(user_id)
        try:
            current = await self.redis.get(key)
            if current is None:
                logger.warning(f"Checkout lock for user {user_id} expired before release")
                return False
            if isinstance(current, bytes):
                current = current.decode()
            if current != owner:
                logger.warning(f"Checkout lock for user {user_id} is held by another checkout, not releasing")
                return False
            await self.redis.delete(key)
            return True
        except RedisError as e:
            # The key expires on its own
            logger.error(f"Could not release checkout lock for user {user_id}: {e}")
            return False

    @asynccontextmanager
    async def hold(self, user_id: int) -> AsyncGenerator[str, None]:
        """
        Hold the lock for the duration of the block.

        Raises:
            CheckoutInProgressException: Another checkout of this user is running
            StoreUnavailableException: Redis is unreachable
        """
        owner = await self.acquire(user_id)
        if owner is None:
            logger.info(f"Rejected concurrent checkout for user {user_id}")
            raise CheckoutInProgressException(user_id)
        try:
            yield owner
        finally:
            await self.release(user_id, owner)
