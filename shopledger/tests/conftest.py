"""
Centralized Test Configuration.
"""

import pytest
from datetime import date
from decimal import Decimal
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from shopledger.app.main import app
from shopledger.app.db.session import get_db, Base
from shopledger.app.core.redis_client import get_redis
import shopledger.app.core.redis_client as redis_client_module

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Event handler to enable foreign keys for SQLite
from sqlalchemy import event
from sqlalchemy.pool import Pool

@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)).lower():
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


class MockLock:
    """In-process stand-in for redis.asyncio.lock.Lock."""

    def __init__(self, redis, name, timeout=None, blocking_timeout=None):
        self.redis = redis
        self.name = name
        self.timeout = timeout
        self.blocking_timeout = blocking_timeout
        self.owned = False

    async def acquire(self):
        # No real waiting: a held lock behaves like an expired blocking timeout.
        if self.name in self.redis.store:
            return False
        self.redis.store[self.name] = "locked"
        self.owned = True
        self.redis.acquired.append(self.name)
        return True

    async def release(self):
        if self.owned:
            self.redis.store.pop(self.name, None)
            self.owned = False


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self.acquired = []
        self._closed = False

    async def ping(self):
        if self._closed:
            return False
        return True

    def lock(self, name, timeout=None, blocking_timeout=None):
        return MockLock(self, name, timeout=timeout, blocking_timeout=blocking_timeout)

    async def flushdb(self):
        self.store = {}
        self.acquired = []

    async def aclose(self):
        self._closed = True
        self.store = {}


# Redis Fixture (Session Scope)
@pytest.fixture(scope="session")
def redis_client_session():
    return MockRedis()


@pytest.fixture(scope="session", autouse=True)
def apply_overrides(redis_client_session):
    """Apply overrides once for the session."""
    original_client = redis_client_module.redis_client
    redis_client_module.redis_client = redis_client_session

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    async def override_get_redis():
        return redis_client_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    yield

    # Restore and clear
    app.dependency_overrides = {}
    redis_client_module.redis_client = original_client


@pytest.fixture(autouse=True)
async def setup_database(redis_client_session):
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await redis_client_session.flushdb()

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def mock_redis(redis_client_session):
    return redis_client_session


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
async def other_db_session():
    """A second session, standing in for a concurrent request."""
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
async def rental_unit(db_session):
    """A shop rented since 2023-01-01 at 10000/month, 10% yearly increase."""
    from shopledger.app.domain.rent.rental_unit_service import RentalUnitService

    return await RentalUnitService.create(db_session, {
        "name": "Shop 1",
        "owner": "Ramesh Kumar",
        "phone": "9876543210",
        "address": "Main Bazaar",
        "monthly_rent": Decimal("10000"),
        "electricity_rate": Decimal("500"),
        "yearly_increase_percentage": Decimal("10"),
        "rent_start_date": date(2023, 1, 1),
        "last_rent_update": date(2023, 1, 1),
    })


@pytest.fixture
async def bill(db_session, rental_unit):
    """A 1000 bill with no payments."""
    from shopledger.app.domain.billing.billing_service import BillingService

    return await BillingService.create_bill(db_session, {
        "rental_unit_id": rental_unit.id,
        "bill_number": "BILL2301001",
        "bill_date": date(2023, 2, 1),
        "items": [{"description": "January 2023 rent", "amount": Decimal("1000")}],
    }, today=date(2023, 2, 1))
