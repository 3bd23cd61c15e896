"""
Repository for primary identities.
"""

from typing import Optional

from sqlalchemy import select, text, update
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.telemetry import trace_span
from common.repositories.base import BaseRepository
from packages.identities.models.database.identity import PrimaryIdentityEntity
from packages.identities.models.domain.identity import (
    PrimaryIdentity,
    PrimaryIdentityCreateModel,
)
from packages.identities.models.domain.wallet_key import WalletKey


class PrimaryIdentityRepository(
    BaseRepository[PrimaryIdentityEntity, PrimaryIdentity]
):
    """Repository for primary identities and their trial/counter columns."""

    def __init__(self, db_session: Optional[AsyncSession] = None):
        super().__init__(PrimaryIdentityEntity, PrimaryIdentity, db_session)

    def _select(self):
        # Subscription is joined eagerly; refresh rows already in the session
        return select(PrimaryIdentityEntity).execution_options(populate_existing=True)

    @trace_span
    async def get(self, id: int) -> Optional[PrimaryIdentity]:
        async with self._get_session() as session:
            result = await session.execute(
                self._select().where(PrimaryIdentityEntity.id == id)
            )
            entity = result.unique().scalar_one_or_none()
            return self._entity_to_domain(entity) if entity else None

    @trace_span
    async def get_by_wallet(self, key: WalletKey) -> Optional[PrimaryIdentity]:
        """Case-insensitive lookup by the normalized wallet address."""
        async with self._get_session() as session:
            result = await session.execute(
                self._select().where(
                    PrimaryIdentityEntity.wallet_address_normalized
                    == key.normalized_address,
                    PrimaryIdentityEntity.blockchain_id == key.blockchain_id,
                )
            )
            entity = result.unique().scalar_one_or_none()
            return self._entity_to_domain(entity) if entity else None

    @trace_span
    async def create(self, create_model: PrimaryIdentityCreateModel) -> PrimaryIdentity:
        data = create_model.model_dump(exclude_none=True)
        async with self._get_session() as session:
            entity = PrimaryIdentityEntity(**data)
            session.add(entity)
            await session.flush()
            result = await session.execute(
                self._select().where(PrimaryIdentityEntity.id == entity.id)
            )
            return self._entity_to_domain(result.unique().scalar_one())

    @trace_span
    async def mark_trial_used(self, id: int) -> bool:
        """Flip trial_used once. Returns False if it was already set."""
        async with self._get_session() as session:
            result = await session.execute(
                update(PrimaryIdentityEntity)
                .where(
                    PrimaryIdentityEntity.id == id,
                    PrimaryIdentityEntity.trial_used.is_(False),
                )
                .values(trial_used=True)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount > 0

    @trace_span
    async def increment_transaction_count(self, id: int) -> None:
        """In-place increment of the denormalized transaction counter."""
        async with self._get_session() as session:
            await session.execute(
                update(PrimaryIdentityEntity)
                .where(PrimaryIdentityEntity.id == id)
                .values(
                    transaction_count=PrimaryIdentityEntity.transaction_count + 1
                )
                .execution_options(synchronize_session=False)
            )

    @trace_span
    async def acquire_owner_lock(self, id: int) -> None:
        """
        Acquire an advisory lock on an owner's wallet portfolio.

        Serializes wallet-limit check + link for the same owner. Must be
        called inside ``transaction()``; the lock is released when that
        transaction commits or rolls back.
        """
        await self._advisory_xact_lock(f"owner:{id}")

    @trace_span
    async def acquire_wallet_lock(self, key: WalletKey) -> None:
        """
        Acquire an advisory lock on a normalized (wallet, chain) pair.

        Registration and linking both take it before their cross-table
        existence checks, so a wallet ends up as at most one identity.
        """
        await self._advisory_xact_lock(
            f"wallet:{key.normalized_address}:{key.blockchain_id}"
        )

    async def _advisory_xact_lock(self, lock_key: str) -> None:
        async with self._get_session() as session:
            if session.get_bind().dialect.name != "postgresql":
                # SQLite serializes writers on the database file
                return
            await session.execute(
                text("SELECT pg_advisory_xact_lock(hashtextextended(:lock_key, 0))"),
                {"lock_key": lock_key},
            )
