"""
Repository for linked identities.
"""

from typing import List, Optional

from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.telemetry import trace_span
from common.repositories.base import BaseRepository
from packages.billing.models.domain.enums import PlanName
from packages.identities.models.database.identity import LinkedIdentityEntity
from packages.identities.models.domain.identity import LinkedIdentity
from packages.identities.models.domain.wallet_key import WalletKey


class LinkedIdentityRepository(BaseRepository[LinkedIdentityEntity, LinkedIdentity]):
    """Repository for wallets linked under a primary identity."""

    def __init__(self, db_session: Optional[AsyncSession] = None):
        super().__init__(LinkedIdentityEntity, LinkedIdentity, db_session)

    @trace_span
    async def get_by_wallet(self, key: WalletKey) -> Optional[LinkedIdentity]:
        """Case-insensitive lookup by the normalized wallet address."""
        async with self._get_session() as session:
            result = await session.execute(
                select(LinkedIdentityEntity).where(
                    LinkedIdentityEntity.wallet_address_normalized
                    == key.normalized_address,
                    LinkedIdentityEntity.blockchain_id == key.blockchain_id,
                )
            )
            entity = result.scalar_one_or_none()
            return self._entity_to_domain(entity) if entity else None

    @trace_span
    async def list_by_parent(self, parent_id: int) -> List[LinkedIdentity]:
        async with self._get_session() as session:
            result = await session.execute(
                select(LinkedIdentityEntity)
                .where(LinkedIdentityEntity.parent_id == parent_id)
                .order_by(LinkedIdentityEntity.id)
            )
            return self._entities_to_domain(result.scalars().all())

    @trace_span
    async def count_by_parent(self, parent_id: int) -> int:
        async with self._get_session() as session:
            result = await session.execute(
                select(func.count(LinkedIdentityEntity.id)).where(
                    LinkedIdentityEntity.parent_id == parent_id
                )
            )
            return result.scalar_one() or 0

    @trace_span
    async def set_plan_name_for_parent(self, parent_id: int, plan_name: PlanName) -> int:
        """Refresh the denormalized plan name on every wallet under a parent."""
        async with self._get_session() as session:
            result = await session.execute(
                update(LinkedIdentityEntity)
                .where(LinkedIdentityEntity.parent_id == parent_id)
                .values(plan_name=PlanName(plan_name).value)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount
