"""
Service for the usage ledger: query counters and transaction volume.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from common.core.telemetry import trace_span, get_logger
from common.db.context import readonly
from common.utils.clock import current_period
from packages.billing.models.domain.enums import TransactionStatus, TransactionType
from packages.billing.models.domain.usage import (
    Transaction,
    TransactionCreateModel,
    UsageStats,
)
from packages.billing.repositories.usage_repository import QueryUsageRepository
from packages.billing.repositories.transaction_repository import TransactionRepository
from packages.billing.services.entitlement_service import EntitlementService
from packages.identities.models.domain.identity import ResolvedIdentity
from packages.identities.repositories.primary_identity_repository import (
    PrimaryIdentityRepository,
)
from packages.identities.repositories.linked_identity_repository import (
    LinkedIdentityRepository,
)

logger = get_logger(__name__)


class UsageService:
    """
    Records and reads usage.

    Counters are keyed by the billing (primary) identity, so every wallet of
    an owner draws from the same monthly quota.
    """

    def __init__(self):
        self.query_usage_repo = QueryUsageRepository()
        self.transaction_repo = TransactionRepository()
        self.primary_repo = PrimaryIdentityRepository()
        self.linked_repo = LinkedIdentityRepository()
        self.entitlement_service = EntitlementService()

    # ========================================================================
    # Query counters
    # ========================================================================

    @trace_span
    async def record_query(self, identity_id: int, month: int, year: int) -> int:
        """Atomically add one query to the period counter. Returns the new count."""
        used = await self.query_usage_repo.increment(identity_id, month, year)
        logger.info(
            f"Recorded query for identity {identity_id} ({month}/{year}), used={used}",
            extra={"identity_id": identity_id, "month": month, "year": year},
        )
        return used

    @trace_span
    async def record_query_for(
        self, resolved: ResolvedIdentity, now: Optional[datetime] = None
    ) -> int:
        month, year = current_period(now)
        return await self.record_query(resolved.billing_identity.id, month, year)

    @trace_span
    async def get_usage(self, identity_id: int, month: int, year: int) -> int:
        return await self.query_usage_repo.get_used(identity_id, month, year)

    @trace_span
    async def get_usage_for(
        self, resolved: ResolvedIdentity, now: Optional[datetime] = None
    ) -> int:
        month, year = current_period(now)
        return await self.get_usage(resolved.billing_identity.id, month, year)

    # ========================================================================
    # Transactions
    # ========================================================================

    @trace_span
    async def get_transaction_volume(
        self, identity_id: int, now: Optional[datetime] = None
    ) -> Decimal:
        """Successful transaction volume in the current calendar month."""
        month, year = current_period(now)
        return await self.transaction_repo.get_monthly_volume(identity_id, month, year)

    @trace_span
    async def record_transaction(
        self,
        resolved: ResolvedIdentity,
        amount: Decimal,
        tx_type: TransactionType = TransactionType.INVOICE,
        status: TransactionStatus = TransactionStatus.SUCCESS,
        tx_hash: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Transaction:
        """
        Store a transaction against the billing identity.

        The owner's ``transaction_count`` is bumped afterwards on a best-effort
        basis: it can be recomputed from the rows, so a failure there is
        logged and does not fail the recording.
        """
        owner = resolved.billing_identity
        transaction = await self.transaction_repo.create(
            TransactionCreateModel(
                identity_id=owner.id,
                linked_identity_id=resolved.identity.id if resolved.is_linked else None,
                amount=amount,
                status=status,
                tx_type=tx_type,
                tx_hash=tx_hash,
                description=description,
            )
        )

        logger.info(
            f"Recorded {status.value} transaction {transaction.id} of {amount} for identity {owner.id}",
            extra={
                "identity_id": owner.id,
                "transaction_id": transaction.id,
                "amount": str(amount),
            },
        )

        try:
            await self.primary_repo.increment_transaction_count(owner.id)
        except SQLAlchemyError as e:
            logger.warning(
                f"Failed to update transaction count for identity {owner.id}: {e}",
                extra={"identity_id": owner.id, "error": str(e)},
            )

        return transaction

    # ========================================================================
    # Stats
    # ========================================================================

    @trace_span
    @readonly
    async def get_usage_stats(
        self, resolved: ResolvedIdentity, now: Optional[datetime] = None
    ) -> UsageStats:
        """Current-period usage, limits, and trial state for dashboards."""
        owner = resolved.billing_identity
        month, year = current_period(now)

        entitlement = await self.entitlement_service.get_entitlement(resolved, now)
        queries_used = await self.get_usage(owner.id, month, year)
        volume = await self.transaction_repo.get_monthly_volume(owner.id, month, year)
        linked_count = await self.linked_repo.count_by_parent(owner.id)

        return UsageStats(
            identity_id=owner.id,
            plan_name=entitlement.plan_name,
            month=month,
            year=year,
            queries_used=queries_used,
            query_limit=entitlement.query_limit,
            transaction_volume=volume,
            txn_limit=entitlement.txn_limit,
            transaction_count=owner.transaction_count,
            wallets_used=linked_count + 1,
            max_wallets=entitlement.max_wallets,
            trial_active=entitlement.trial_active,
            trial_days_remaining=entitlement.trial_days_remaining,
        )
