"""
Rate Limiting

Protects the API from abuse using Redis-based fixed-window counters.

Features:
- Per-subject limits (user id, email address, ...)
- Configurable limits via environment variables
- Automatic expiry using Redis TTL
- Fails open when Redis is unreachable

Configuration:
- MAX_RESET_REQUESTS_PER_HOUR: Maximum password reset mails per address per hour
"""

import logging

from redis.asyncio import Redis

from enums.rate_limit_operation import RateLimitOperation
from exceptions import RateLimitExceededException


class RateLimiter:
    """
    Redis-based rate limiter for specific operations.

    Usage:
        limiter = RateLimiter(redis)
        await limiter.enforce(RateLimitOperation.PASSWORD_RESET_REQUEST, email,
                              max_count=3, window_seconds=3600)
    """

    def __init__(self, redis: Redis):
        self.redis = redis

    @staticmethod
    def _key(operation: RateLimitOperation | str, subject: int | str) -> str:
        operation = operation.value if isinstance(operation, RateLimitOperation) else operation
        return f"rate_limit:{operation}:{subject}"

    async def is_rate_limited(
        self,
        operation: RateLimitOperation | str,
        subject: int | str,
        max_count: int,
        window_seconds: int
    ) -> tuple[bool, int, int]:
        """
        Check if a subject has exceeded the rate limit for an operation.

        Every call counts as one attempt.

        Args:
            operation: Operation name (e.g., RateLimitOperation.PASSWORD_RESET_REQUEST)
            subject: Who is limited (user id, normalized email)
            max_count: Maximum allowed operations in time window
            window_seconds: Time window in seconds

        Returns:
            Tuple of (is_limited, current_count, remaining_count)
        """
        key = self._key(operation, subject)

        try:
            # Increment counter (creates key if doesn't exist)
            current_count = await self.redis.incr(key)

            # Set expiry on first increment
            if current_count == 1:
                await self.redis.expire(key, window_seconds)

            is_limited = current_count > max_count
            remaining = max(0, max_count - current_count)

            if is_limited:
                ttl = await self.redis.ttl(key)
                logging.warning(
                    f"Rate limit exceeded: subject={subject}, operation={operation}, "
                    f"count={current_count}/{max_count}, resets_in={ttl}s"
                )

            return is_limited, current_count, remaining

        except Exception as e:
            # If Redis fails, don't block the operation (fail open)
            logging.error(f"Rate limiter error: {e}")
            return False, 0, max_count

    async def enforce(
        self,
        operation: RateLimitOperation | str,
        subject: int | str,
        max_count: int,
        window_seconds: int
    ) -> None:
        """
        Count an attempt and raise RateLimitExceededException if over the limit.
        """
        is_limited, _, _ = await self.is_rate_limited(operation, subject, max_count, window_seconds)
        if is_limited:
            reset_seconds = await self.get_remaining_time(operation, subject)
            raise RateLimitExceededException(
                operation=operation.value if isinstance(operation, RateLimitOperation) else operation,
                reset_seconds=reset_seconds or window_seconds
            )

    async def get_remaining_time(self, operation: RateLimitOperation | str, subject: int | str) -> int:
        """
        Get remaining seconds until the rate limit resets (0 if no window is open).
        """
        try:
            ttl = await self.redis.ttl(self._key(operation, subject))
        except Exception as e:
            logging.error(f"Rate limiter error: {e}")
            return 0
        return max(0, ttl) if ttl > 0 else 0
