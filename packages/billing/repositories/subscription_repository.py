"""
Repository for subscriptions.
"""

from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.telemetry import trace_span
from common.db.upsert import dialect_insert
from common.repositories.base import BaseRepository
from common.utils.clock import utc_now
from packages.billing.models.database.subscription import SubscriptionEntity
from packages.billing.models.domain.subscription import (
    Subscription,
    SubscriptionCreateModel,
)


class SubscriptionRepository(BaseRepository[SubscriptionEntity, Subscription]):
    """Repository for identity subscriptions."""

    def __init__(self, db_session: Optional[AsyncSession] = None):
        super().__init__(SubscriptionEntity, Subscription, db_session)

    @trace_span
    async def get_by_identity_id(self, identity_id: int) -> Optional[Subscription]:
        """Get the subscription row of a primary identity."""
        async with self._get_session() as session:
            result = await session.execute(
                select(SubscriptionEntity)
                .where(SubscriptionEntity.identity_id == identity_id)
                .execution_options(populate_existing=True)
            )
            entity = result.scalar_one_or_none()
            return self._entity_to_domain(entity) if entity else None

    @trace_span
    async def upsert_for_identity(
        self, create_model: SubscriptionCreateModel
    ) -> Subscription:
        """
        Create or replace the subscription of an identity in one statement.

        Payment notifications can arrive more than once; the latest one wins.
        """
        data = create_model.model_dump()
        async with self._get_session() as session:
            stmt = dialect_insert(session, SubscriptionEntity.__table__).values(**data)
            stmt = stmt.on_conflict_do_update(
                index_elements=[SubscriptionEntity.identity_id],
                set_={
                    "plan_name": stmt.excluded.plan_name,
                    "is_active": stmt.excluded.is_active,
                    "payment_provider": stmt.excluded.payment_provider,
                    "external_subscription_id": stmt.excluded.external_subscription_id,
                    "current_period_end": stmt.excluded.current_period_end,
                    "updated_at": utc_now(),
                },
            )
            await session.execute(stmt)
            await session.flush()

        return await self.get_by_identity_id(create_model.identity_id)
