# Shared pytest configuration and fixtures for all test types
import os

# Settings are read at import time, so the test profile must be in place first
os.environ.setdefault("LOCK_PROVIDER", "memory")
os.environ.setdefault("INTERNAL_API_KEY", "test-internal-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_STORAGE_URI", "memory://")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_secret")

import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)

from api.main import app  # noqa: E402
from common.db.base import Base  # noqa: E402
from common.providers.locking.factory import reset_lock_provider  # noqa: E402

# Register every table on Base.metadata
from packages.accounts.models.database.account import AccountEntity  # noqa: E402,F401
from packages.jobs.models.database.job import JobEntity  # noqa: E402,F401
from packages.billing.models.database.subscription import (  # noqa: E402,F401
    SubscriptionEntity,
)
from packages.billing.models.database.ledger import LedgerEntryEntity  # noqa: E402,F401

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

INTERNAL_API_KEY = os.environ["INTERNAL_API_KEY"]


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine and initialize schema."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_connection(test_engine):
    """Create test connection with outer transaction for rollback isolation."""
    async with test_engine.connect() as connection:
        trans = await connection.begin()
        yield connection
        await trans.rollback()


@pytest_asyncio.fixture(scope="function")
async def test_session_factory(test_connection):
    """Create session factory bound to test connection.

    Using join_transaction_mode="create_savepoint" so nested transaction()
    calls create savepoints instead of real nested transactions.
    """
    return async_sessionmaker(
        bind=test_connection,
        class_=AsyncSession,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )


@pytest_asyncio.fixture(scope="function")
async def test_db(test_session_factory):
    """Create a test database session."""
    async with test_session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function", autouse=True)
async def patch_lazy_sessions(test_session_factory, monkeypatch):
    """
    Patch session factories to use test database.

    This allows real transaction() and get_session() to run with proper
    commit/rollback/ContextVar semantics while using the test database.
    """
    monkeypatch.setattr("common.db.scoped.AsyncSessionLocal", test_session_factory)
    monkeypatch.setattr(
        "common.db.scoped.AsyncSessionLocalReadonly", test_session_factory
    )


@pytest_asyncio.fixture(scope="function", autouse=True)
async def fresh_lock_provider():
    """Each test gets its own in-memory lock table."""
    reset_lock_provider()
    yield
    reset_lock_provider()


@pytest_asyncio.fixture(scope="function")
async def client():
    """Create a test client that authenticates as an internal caller."""
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            headers={"X-Api-Key": INTERNAL_API_KEY},
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def anonymous_client():
    """Create a test client without the internal API key."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
