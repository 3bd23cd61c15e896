# Shared pytest configuration and fixtures for all test types
import pytest
import pytest_asyncio
from datetime import timedelta
from eth_account import Account
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from slowapi import Limiter
from slowapi.util import get_remote_address
from unittest.mock import patch

# Create test limiter with no limits and in-memory storage
test_limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],
    storage_uri="memory://",
)

# Patch the limiter before importing the app so decorators use test limiter
with patch("common.providers.rate_limiter.limiter.limiter", test_limiter):
    from api.main import app

from common.db.base import Base
from common.utils.clock import utc_now
from packages.identities.models.database.identity import (
    PrimaryIdentityEntity,
    LinkedIdentityEntity,
)
from packages.billing.models.domain.enums import PlanName
from tests.fixtures import (
    CHAIN_ID,
    LINKED_WALLET,
    OTHER_WALLET,
    PRIMARY_WALLET,
    add_subscription,
)

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


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


@pytest_asyncio.fixture(scope="function")
async def client():
    """Create a test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


# ============================================================================
# Wallets
# ============================================================================


@pytest.fixture
def wallet_account():
    """A fresh local wallet that can sign registration messages."""
    return Account.create()


@pytest.fixture
def second_wallet_account():
    return Account.create()


# ============================================================================
# Identities
# ============================================================================


@pytest_asyncio.fixture(scope="function")
async def sample_primary_identity(test_db: AsyncSession):
    """Primary identity on the free plan, one day into its trial."""
    identity = PrimaryIdentityEntity(
        wallet_address=PRIMARY_WALLET,
        wallet_address_normalized=PRIMARY_WALLET.lower(),
        blockchain_id=CHAIN_ID,
        name="Test Merchant",
        email="merchant@example.com",
        credit_score=712,
        trial_start_date=utc_now() - timedelta(days=1),
        trial_used=False,
    )
    test_db.add(identity)
    await test_db.commit()
    await test_db.refresh(identity)
    return identity


@pytest_asyncio.fixture(scope="function")
async def expired_trial_identity(test_db: AsyncSession):
    """Free-plan identity registered six days ago, past a five-day trial."""
    identity = PrimaryIdentityEntity(
        wallet_address=OTHER_WALLET,
        wallet_address_normalized=OTHER_WALLET.lower(),
        blockchain_id=CHAIN_ID,
        trial_start_date=utc_now() - timedelta(days=6),
        trial_used=False,
    )
    test_db.add(identity)
    await test_db.commit()
    await test_db.refresh(identity)
    return identity


@pytest_asyncio.fixture(scope="function")
async def sample_linked_identity(test_db: AsyncSession, sample_primary_identity):
    """Wallet linked under the sample primary identity."""
    linked = LinkedIdentityEntity(
        wallet_address=LINKED_WALLET,
        wallet_address_normalized=LINKED_WALLET.lower(),
        blockchain_id=CHAIN_ID,
        parent_id=sample_primary_identity.id,
        plan_name=PlanName.FREE.value,
    )
    test_db.add(linked)
    await test_db.commit()
    await test_db.refresh(linked)
    return linked


# ============================================================================
# Billing
# ============================================================================


@pytest_asyncio.fixture(scope="function")
async def pro_subscription(test_db: AsyncSession, sample_primary_identity):
    """Active Pro subscription for the sample primary identity."""
    return await add_subscription(test_db, sample_primary_identity.id, PlanName.PRO)
