"""
Unit tests for QueryUsageRepository.

Runs the INSERT ... ON CONFLICT path against SQLite.
"""

import pytest

from packages.billing.repositories.usage_repository import QueryUsageRepository


@pytest.mark.asyncio
class TestQueryUsageRepository:
    """Tests for QueryUsageRepository."""

    async def test_missing_counter_reads_zero(self, test_db, sample_primary_identity):
        repo = QueryUsageRepository(test_db)

        assert await repo.get_used(sample_primary_identity.id, 3, 2026) == 0

    async def test_increment_creates_then_adds(self, test_db, sample_primary_identity):
        repo = QueryUsageRepository(test_db)

        assert await repo.increment(sample_primary_identity.id, 3, 2026) == 1
        assert await repo.increment(sample_primary_identity.id, 3, 2026) == 2
        assert await repo.get_used(sample_primary_identity.id, 3, 2026) == 2

    async def test_periods_are_independent(self, test_db, sample_primary_identity):
        repo = QueryUsageRepository(test_db)

        await repo.increment(sample_primary_identity.id, 3, 2026)
        await repo.increment(sample_primary_identity.id, 3, 2026)
        await repo.increment(sample_primary_identity.id, 4, 2026)

        assert await repo.get_used(sample_primary_identity.id, 3, 2026) == 2
        assert await repo.get_used(sample_primary_identity.id, 4, 2026) == 1
        assert await repo.get_used(sample_primary_identity.id, 3, 2027) == 0

    async def test_increments_with_lazy_sessions(self, sample_primary_identity):
        """Each call commits on its own session; nothing is lost."""
        repo = QueryUsageRepository()

        for _ in range(5):
            await repo.increment(sample_primary_identity.id, 1, 2026)

        assert await repo.get_used(sample_primary_identity.id, 1, 2026) == 5
