import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from db import get_db_session, session_commit, session_rollback

logger = logging.getLogger(__name__)


class TransactionManager:
    """
    Utility class for running a unit of work in one database transaction.

    Everything written inside ``atomic_transaction`` is committed together
    or rolled back together; the original exception always propagates.
    """

    # Transactions running longer than this are logged
    SLOW_TRANSACTION_SECONDS = 5

    @staticmethod
    @asynccontextmanager
    async def atomic_transaction(session_factory: Callable | None = None) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for atomic database transactions.

        Args:
            session_factory: Callable returning an async session context manager
                             (defaults to db.get_db_session)

        Usage:
            async with TransactionManager.atomic_transaction() as session:
                await OrderRepository.create(order_dto, order_items, session)
                await CartItemRepository.remove_purchased(lines, user_id, session)
        """
        session_factory = session_factory or get_db_session
        session = None

        try:
            async with session_factory() as session:
                transaction_start = datetime.now()
                logger.debug(f"Transaction started at {transaction_start}")

                yield session

                await session_commit(session)
                duration = (datetime.now() - transaction_start).total_seconds()
                if duration > TransactionManager.SLOW_TRANSACTION_SECONDS:
                    logger.warning(f"Slow transaction: {duration:.2f}s")
                logger.debug(f"Transaction committed successfully in {duration:.2f}s")

        except Exception as e:
            if session is not None:
                try:
                    await session_rollback(session)
                    logger.info(f"Transaction rolled back due to error: {str(e)}")
                except Exception as rollback_error:
                    logger.critical(f"Failed to rollback transaction: {str(rollback_error)}")
            raise
