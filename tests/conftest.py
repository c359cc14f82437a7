"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import asyncio
import os
import sys

# Test configuration must be in the environment before config is imported
os.environ.setdefault("APP_SECRET", "test_app_secret_0123456789abcdef0123456789abcdef")
os.environ.setdefault("RUNTIME_ENVIRONMENT", "TEST")
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("CURRENCY", "USD")
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")  # Fast hashing for tests
os.environ.setdefault("FRONTEND_URL", "http://localhost:7777")
os.environ.setdefault("MAIL_HOST", "smtp.test")

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base
from enums.currency import Currency
from enums.permission import Permission
from exceptions import MailDeliveryException
from models.item import ItemDTO
from models.payment import ChargeDTO
from models.user import UserDTO
from repositories.item import ItemRepository
from repositories.user import UserRepository
from services.checkout import CheckoutService
from services.mail import MailService
from utils.checkout_lock import CheckoutLock
from utils.password_hasher import PasswordHasher
from utils.reconciliation import ReconciliationLog


# ============================================================================
# Test doubles
# ============================================================================

class FakeGateway:
    """Payment gateway double recording every charge request."""

    def __init__(self, amount: int | None = None, error: Exception | None = None,
                 on_charge=None, delay: float = 0):
        self.amount = amount
        self.error = error
        self.on_charge = on_charge
        self.delay = delay
        self.calls = []

    async def create_charge(self, amount: int, currency: Currency, token: str, description: str | None = None):
        self.calls.append({"amount": amount, "currency": currency, "token": token})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.on_charge is not None:
            await self.on_charge()
        if self.error is not None:
            raise self.error
        return ChargeDTO(
            id=f"ch_test_{len(self.calls)}",
            amount=self.amount if self.amount is not None else amount,
            currency=currency.to_gateway_code(),
            status="succeeded",
            paid=True
        )


class FakeMailService(MailService):
    """Mail service double keeping messages in memory."""

    def __init__(self, fail: bool = False):
        super().__init__(host="smtp.test", port=25, user="", password="", sender="shop@test")
        self.fail = fail
        self.sent = []

    async def send(self, to: str, subject: str, html: str) -> None:
        if self.fail:
            raise MailDeliveryException(to, "connection refused")
        self.sent.append({"to": to, "subject": subject, "html": html})


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine (in-memory SQLite shared by all sessions)."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    """Session factory injected into services the way db.get_db_session is."""
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_session(session_factory):
    """Create test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


# ============================================================================
# Redis Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def redis_client():
    """Create fake Redis client for testing (no real Redis server needed)."""
    client = FakeAsyncRedis(decode_responses=True)
    yield client
    await client.aclose()


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def mail_service():
    return FakeMailService()


@pytest.fixture
def checkout_service(gateway, redis_client, session_factory):
    return CheckoutService(
        gateway=gateway,
        checkout_lock=CheckoutLock(redis_client, timeout_seconds=30),
        reconciliation_log=ReconciliationLog(redis_client),
        session_factory=session_factory,
        currency=Currency.USD
    )


# ============================================================================
# Data Factories
# ============================================================================

@pytest.fixture
def make_user(session_factory):
    """Factory creating a committed user."""
    counter = {"n": 0}

    async def _make_user(email: str | None = None, name: str = "Test User", password: str = "secret-password",
                         permissions: list[Permission] | None = None) -> UserDTO:
        counter["n"] += 1
        async with session_factory() as session:
            user_id = await UserRepository.create(UserDTO(
                name=name,
                email=email or f"user{counter['n']}@example.com",
                password=PasswordHasher.hash(password),
                permissions=permissions or [Permission.USER]
            ), session)
            await session.commit()
            return await UserRepository.get_by_id(user_id, session)

    return _make_user


@pytest.fixture
def make_item(session_factory):
    """Factory creating a committed item."""

    async def _make_item(owner_id: int, title: str = "Dog Sweater", price: int = 1000,
                         description: str = "Warm and fuzzy", image: str | None = "dog.jpg",
                         large_image: str | None = "dog-large.jpg") -> ItemDTO:
        async with session_factory() as session:
            item_id = await ItemRepository.create(ItemDTO(
                title=title,
                description=description,
                price=price,
                image=image,
                large_image=large_image,
                user_id=owner_id
            ), session)
            await session.commit()
            return await ItemRepository.get_by_id(item_id, session)

    return _make_item
