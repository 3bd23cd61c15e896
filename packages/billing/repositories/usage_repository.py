"""
Repository for monthly query usage counters.
"""

from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.telemetry import trace_span
from common.db.upsert import dialect_insert
from common.repositories.base import BaseRepository
from common.utils.clock import utc_now
from packages.billing.models.database.usage import QueryUsageEntity
from packages.billing.models.domain.usage import QueryUsage


class QueryUsageRepository(BaseRepository[QueryUsageEntity, QueryUsage]):
    """
    Repository for (identity, month, year) query counters.

    Increments are a single INSERT ... ON CONFLICT DO UPDATE so concurrent
    requests for the same identity never lose an update.
    """

    def __init__(self, db_session: Optional[AsyncSession] = None):
        super().__init__(QueryUsageEntity, QueryUsage, db_session)

    @trace_span
    async def increment(self, identity_id: int, month: int, year: int) -> int:
        """Create the counter at 1 or add 1 to it. Returns the new value."""
        table = QueryUsageEntity.__table__
        async with self._get_session() as session:
            stmt = dialect_insert(session, table).values(
                identity_id=identity_id, month=month, year=year, used=1
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[table.c.identity_id, table.c.month, table.c.year],
                set_={"used": table.c.used + 1, "updated_at": utc_now()},
            ).returning(table.c.used)
            result = await session.execute(stmt)
            return result.scalar_one()

    @trace_span
    async def get_used(self, identity_id: int, month: int, year: int) -> int:
        """Counter value for the period; a missing row counts as zero."""
        async with self._get_session() as session:
            result = await session.execute(
                select(QueryUsageEntity.used).where(
                    QueryUsageEntity.identity_id == identity_id,
                    QueryUsageEntity.month == month,
                    QueryUsageEntity.year == year,
                )
            )
            return result.scalar_one_or_none() or 0
