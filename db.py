from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator
import logging

from sqlalchemy import event, Engine, Result, CursorResult
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

import config
from exceptions import StoreUnavailableException
from models.base import Base

"""
Imports of these models are needed to correctly create tables in the database.
For more information see https://stackoverflow.com/questions/7478403/sqlalchemy-classes-across-files
"""
from models.user import User
from models.item import Item
from models.cartItem import CartItem
from models.order import Order
from models.orderItem import OrderItem

logger = logging.getLogger(__name__)

# SQLite needs the parent folder of the database file to exist
if config.DB_URL.startswith("sqlite") and ":memory:" not in config.DB_URL:
    data_folder = Path(config.DB_URL.split(":///", 1)[-1]).parent
    if data_folder.exists() is False:
        data_folder.mkdir(parents=True)

engine = create_async_engine(config.DB_URL, echo=False)
session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


async def session_execute(stmt, session: AsyncSession) -> Result[Any] | CursorResult[Any]:
    try:
        return await session.execute(stmt)
    except OperationalError as e:
        logger.error(f"Store unavailable during execute: {e}")
        raise StoreUnavailableException(operation="execute", reason=str(e.orig)) from e
    except DBAPIError as e:
        # Integrity violations are the caller's business, dropped connections are not
        if e.connection_invalidated:
            logger.error(f"Store connection lost during execute: {e}")
            raise StoreUnavailableException(operation="execute", reason=str(e.orig)) from e
        raise


async def session_flush(session: AsyncSession) -> None:
    try:
        await session.flush()
    except OperationalError as e:
        logger.error(f"Store unavailable during flush: {e}")
        raise StoreUnavailableException(operation="flush", reason=str(e.orig)) from e


async def session_commit(session: AsyncSession) -> None:
    try:
        await session.commit()
    except OperationalError as e:
        logger.error(f"Store unavailable during commit: {e}")
        raise StoreUnavailableException(operation="commit", reason=str(e.orig)) from e


async def session_rollback(session: AsyncSession) -> None:
    await session.rollback()


async def session_refresh(session: AsyncSession, instance) -> None:
    await session.refresh(instance)


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    # Only SQLite needs foreign keys switched on per connection
    if "sqlite" not in type(dbapi_connection).__module__:
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async def create_db_and_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
