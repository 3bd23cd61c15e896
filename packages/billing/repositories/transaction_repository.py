"""
Repository for transactions and monthly transaction volume.
"""

from decimal import Decimal
from typing import Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.telemetry import trace_span
from common.repositories.base import BaseRepository
from common.utils.clock import month_bounds
from packages.billing.models.database.usage import TransactionEntity
from packages.billing.models.domain.enums import TransactionStatus
from packages.billing.models.domain.usage import Transaction


class TransactionRepository(BaseRepository[TransactionEntity, Transaction]):
    """Repository for recorded transactions."""

    def __init__(self, db_session: Optional[AsyncSession] = None):
        super().__init__(TransactionEntity, Transaction, db_session)

    @trace_span
    async def get_monthly_volume(
        self, identity_id: int, month: int, year: int
    ) -> Decimal:
        """Sum of successful transaction amounts within a calendar month."""
        start_date, end_date = month_bounds(month, year)

        async with self._get_session() as session:
            result = await session.execute(
                select(func.coalesce(func.sum(TransactionEntity.amount), 0)).where(
                    TransactionEntity.identity_id == identity_id,
                    TransactionEntity.status == TransactionStatus.SUCCESS.value,
                    TransactionEntity.created_at >= start_date,
                    TransactionEntity.created_at < end_date,
                )
            )
            total = result.scalar_one()
            return Decimal(str(total or 0))
