"""
Tests for utils/reconciliation.py
"""

import logging

import pytest

from utils.reconciliation import ReconciliationLog, RECONCILIATION_KEY


class TestReconciliationLog:
    """Test ReconciliationLog record/pending."""

    @pytest.mark.asyncio
    async def test_record_appends_entry(self, redis_client):
        log = ReconciliationLog(redis_client)

        await log.record(user_id=3, charge_id="ch_1", amount=1500, currency="USD",
                         cart_item_ids=[10, 11], reason="disk full")
        await log.record(user_id=4, charge_id="ch_2", amount=200, currency="USD",
                         cart_item_ids=[12], reason="disk full")

        pending = await log.pending()
        assert [entry["charge_id"] for entry in pending] == ["ch_1", "ch_2"]
        assert pending[0]["cart_item_ids"] == [10, 11]
        assert await redis_client.llen(RECONCILIATION_KEY) == 2

    @pytest.mark.asyncio
    async def test_record_logs_critical(self, redis_client, caplog):
        log = ReconciliationLog(redis_client)

        with caplog.at_level(logging.CRITICAL, logger="utils.reconciliation"):
            await log.record(user_id=3, charge_id="ch_9", amount=1, currency="USD", cart_item_ids=[], reason="x")

        assert any("ch_9" in record.getMessage() and record.levelno == logging.CRITICAL
                   for record in caplog.records)

    @pytest.mark.asyncio
    async def test_empty(self, redis_client):
        assert await ReconciliationLog(redis_client).pending() == []
