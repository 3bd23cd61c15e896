"""
Unit tests for PrimaryIdentityRepository.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from common.utils.clock import utc_now
from packages.billing.models.domain.enums import PlanName
from packages.identities.models.domain.identity import PrimaryIdentityCreateModel
from packages.identities.models.domain.wallet_key import WalletKey
from packages.identities.repositories.primary_identity_repository import (
    PrimaryIdentityRepository,
)
from tests.fixtures import CHAIN_ID, PRIMARY_WALLET, UNKNOWN_WALLET


@pytest.mark.asyncio
class TestPrimaryIdentityRepository:
    """Tests for PrimaryIdentityRepository."""

    async def test_create_identity(self, test_db):
        repo = PrimaryIdentityRepository(test_db)
        started = utc_now()

        identity = await repo.create(
            PrimaryIdentityCreateModel(
                wallet_address=PRIMARY_WALLET,
                blockchain_id=CHAIN_ID,
                name="Merchant",
                trial_start_date=started,
            )
        )

        assert identity.id is not None
        assert identity.wallet_address == PRIMARY_WALLET
        assert identity.trial_used is False
        assert identity.transaction_count == 0
        assert identity.subscription is None
        assert abs((identity.trial_start_date - started).total_seconds()) < 1

    async def test_get_by_wallet_is_case_insensitive(
        self, test_db, sample_primary_identity
    ):
        repo = PrimaryIdentityRepository(test_db)

        for variant in (PRIMARY_WALLET, PRIMARY_WALLET.lower(), "0x" + PRIMARY_WALLET[2:].upper()):
            found = await repo.get_by_wallet(WalletKey.parse(variant, CHAIN_ID))
            assert found is not None
            assert found.id == sample_primary_identity.id
            # Stored casing is preserved
            assert found.wallet_address == PRIMARY_WALLET

    async def test_get_by_wallet_scoped_to_chain(self, test_db, sample_primary_identity):
        repo = PrimaryIdentityRepository(test_db)

        assert await repo.get_by_wallet(WalletKey.parse(PRIMARY_WALLET, "1")) is None
        assert await repo.get_by_wallet(WalletKey.parse(UNKNOWN_WALLET, CHAIN_ID)) is None

    async def test_duplicate_wallet_rejected_regardless_of_casing(
        self, test_db, sample_primary_identity
    ):
        repo = PrimaryIdentityRepository(test_db)

        with pytest.raises(IntegrityError):
            await repo.create(
                PrimaryIdentityCreateModel(
                    wallet_address=PRIMARY_WALLET.lower(), blockchain_id=CHAIN_ID
                )
            )

    async def test_get_includes_subscription(
        self, test_db, sample_primary_identity, pro_subscription
    ):
        repo = PrimaryIdentityRepository(test_db)

        identity = await repo.get(sample_primary_identity.id)

        assert identity.subscription is not None
        assert identity.subscription.plan_name == PlanName.PRO

    async def test_mark_trial_used_only_once(self, test_db, sample_primary_identity):
        repo = PrimaryIdentityRepository(test_db)

        assert await repo.mark_trial_used(sample_primary_identity.id) is True
        assert await repo.mark_trial_used(sample_primary_identity.id) is False

        identity = await repo.get(sample_primary_identity.id)
        assert identity.trial_used is True

    async def test_increment_transaction_count(self, test_db, sample_primary_identity):
        repo = PrimaryIdentityRepository(test_db)

        await repo.increment_transaction_count(sample_primary_identity.id)
        await repo.increment_transaction_count(sample_primary_identity.id)

        identity = await repo.get(sample_primary_identity.id)
        assert identity.transaction_count == 2


@pytest.mark.asyncio
class TestAdvisoryLocks:
    """Transaction-scoped locks that serialize linking and registration."""

    @staticmethod
    def _postgres_session() -> MagicMock:
        session = MagicMock()
        session.get_bind.return_value.dialect.name = "postgresql"
        session.execute = AsyncMock()
        return session

    async def test_owner_lock_issues_advisory_xact_lock(self):
        session = self._postgres_session()

        await PrimaryIdentityRepository(session).acquire_owner_lock(42)

        statement, params = session.execute.await_args.args
        assert "pg_advisory_xact_lock" in str(statement)
        assert params == {"lock_key": "owner:42"}

    async def test_wallet_lock_keys_on_normalized_pair(self):
        session = self._postgres_session()
        key = WalletKey.parse(PRIMARY_WALLET, CHAIN_ID)

        await PrimaryIdentityRepository(session).acquire_wallet_lock(key)

        _, params = session.execute.await_args.args
        assert params == {"lock_key": f"wallet:{PRIMARY_WALLET.lower()}:{CHAIN_ID}"}

    async def test_locks_are_noops_on_sqlite(self, test_db):
        repo = PrimaryIdentityRepository(test_db)

        await repo.acquire_owner_lock(1)
        await repo.acquire_wallet_lock(WalletKey.parse(UNKNOWN_WALLET, CHAIN_ID))
