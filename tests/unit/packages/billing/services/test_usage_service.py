"""
Unit tests for UsageService.
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock

from sqlalchemy.exc import OperationalError

from common.utils.clock import current_period
from packages.billing.models.domain.enums import PlanName, TransactionStatus
from packages.billing.services.usage_service import UsageService
from packages.identities.services.identity_resolver import IdentityResolverService
from packages.identities.repositories.primary_identity_repository import (
    PrimaryIdentityRepository,
)
from tests.fixtures import CHAIN_ID, LINKED_WALLET, PRIMARY_WALLET, add_transaction


async def _resolve(wallet: str):
    return await IdentityResolverService().resolve_identity(wallet, CHAIN_ID)


@pytest.mark.asyncio
class TestQueryCounters:
    async def test_record_n_queries(self, sample_primary_identity):
        service = UsageService()
        month, year = current_period()

        for _ in range(7):
            await service.record_query(sample_primary_identity.id, month, year)

        assert await service.get_usage(sample_primary_identity.id, month, year) == 7

    async def test_linked_wallet_draws_from_owner_counter(
        self, sample_primary_identity, sample_linked_identity
    ):
        service = UsageService()
        primary = await _resolve(PRIMARY_WALLET)
        linked = await _resolve(LINKED_WALLET)

        await service.record_query_for(primary)
        await service.record_query_for(linked)
        await service.record_query_for(linked)

        assert await service.get_usage_for(primary) == 3
        assert await service.get_usage_for(linked) == 3


@pytest.mark.asyncio
class TestTransactions:
    async def test_record_transaction(self, sample_primary_identity, sample_linked_identity):
        service = UsageService()
        linked = await _resolve(LINKED_WALLET)

        transaction = await service.record_transaction(linked, Decimal("125.00"), tx_hash="0xfeed")

        assert transaction.identity_id == sample_primary_identity.id
        assert transaction.linked_identity_id == sample_linked_identity.id
        assert transaction.status == TransactionStatus.SUCCESS
        assert await service.get_transaction_volume(sample_primary_identity.id) == Decimal("125")

        owner = await PrimaryIdentityRepository().get(sample_primary_identity.id)
        assert owner.transaction_count == 1

    async def test_counter_failure_does_not_fail_recording(self, sample_primary_identity):
        service = UsageService()
        service.primary_repo.increment_transaction_count = AsyncMock(
            side_effect=OperationalError("UPDATE", {}, Exception("locked"))
        )
        primary = await _resolve(PRIMARY_WALLET)

        transaction = await service.record_transaction(primary, Decimal("10"))

        assert transaction.id is not None
        assert await service.get_transaction_volume(sample_primary_identity.id) == Decimal("10")


@pytest.mark.asyncio
class TestUsageStats:
    async def test_usage_stats(self, test_db, sample_primary_identity, sample_linked_identity, pro_subscription):
        service = UsageService()
        primary = await _resolve(PRIMARY_WALLET)
        await service.record_query_for(primary)
        await service.record_query_for(primary)
        await add_transaction(test_db, sample_primary_identity.id, 300)

        stats = await service.get_usage_stats(primary)

        assert stats.plan_name == PlanName.PRO
        assert stats.queries_used == 2
        assert stats.query_limit == 15000
        assert stats.queries_remaining == 14998
        assert stats.transaction_volume == Decimal("300")
        assert stats.wallets_used == 2
        assert stats.max_wallets == 3
        assert stats.trial_active is False
