"""
Reconciliation log for captured charges without an order.

When a charge succeeded but the order could not be written, the charge is
recorded here (Redis list ``checkout:reconciliation``) and logged at CRITICAL
so that it can be matched by hand. Nothing in the API pops entries; support
staff inspect them with ``pending()``.
"""

import json
import logging
from datetime import datetime, timezone

from redis.asyncio import Redis

logger = logging.getLogger(__name__)

RECONCILIATION_KEY = "checkout:reconciliation"


class ReconciliationLog:

    def __init__(self, redis: Redis, key: str = RECONCILIATION_KEY):
        self.redis = redis
        self.key = key

    async def record(self, user_id: int, charge_id: str, amount: int, currency: str,
                     cart_item_ids: list[int], reason: str) -> dict:
        entry = {
            "user_id": user_id,
            "charge_id": charge_id,
            "amount": amount,
            "currency": currency,
            "cart_item_ids": cart_item_ids,
            "reason": reason,
            "recorded_at": datetime.now(timezone.utc).isoformat(),
        }
        # The log line is the record of last resort, write it before touching Redis
        logger.critical(
            f"UNRECONCILED CHARGE: charge_id={charge_id} user_id={user_id} "
            f"amount={amount} {currency} reason={reason}"
        )
        try:
            await self.redis.rpush(self.key, json.dumps(entry))
        except Exception as e:
            logger.critical(f"Could not write charge {charge_id} to the reconciliation list: {e}")
        return entry

    async def pending(self) -> list[dict]:
        raw_entries = await self.redis.lrange(self.key, 0, -1)
        return [json.loads(raw) for raw in raw_entries]
