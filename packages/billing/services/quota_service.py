"""
Service for quota gates on metered queries and transaction volume.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from common.core.exceptions import ValidationError
from common.core.telemetry import trace_span, get_logger, log_span_event
from common.utils.clock import as_utc, utc_now
from packages.billing.models.domain.enums import EntitlementErrorCode
from packages.billing.models.domain.usage import QuotaDecision
from packages.billing.services.entitlement_service import EntitlementService
from packages.billing.services.usage_service import UsageService
from packages.identities.models.domain.identity import ResolvedIdentity
from packages.identities.repositories.primary_identity_repository import (
    PrimaryIdentityRepository,
)
from packages.identities.services.identity_resolver import IdentityResolverService

logger = get_logger(__name__)


class QuotaService:
    """
    Pre-operation quota checks.

    Gates only decide; they never increment. Callers record usage after the
    guarded operation succeeds (see ``QueryQuotaGuard``).
    """

    def __init__(self):
        self.resolver = IdentityResolverService()
        self.entitlement_service = EntitlementService()
        self.usage_service = UsageService()
        self.primary_repo = PrimaryIdentityRepository()

    # ========================================================================
    # Query gate
    # ========================================================================

    @trace_span
    async def check_query_quota(
        self, wallet_address: str, blockchain_id: str, now: Optional[datetime] = None
    ) -> QuotaDecision:
        """Resolve the wallet and decide whether one more metered query may run."""
        resolved = await self.resolver.resolve_identity(wallet_address, blockchain_id)
        if resolved is None:
            return QuotaDecision.deny(EntitlementErrorCode.WALLET_NOT_REGISTERED)
        return await self.check_query_quota_for(resolved, now)

    @trace_span
    async def check_query_quota_for(
        self, resolved: ResolvedIdentity, now: Optional[datetime] = None
    ) -> QuotaDecision:
        """
        Query gate for an already resolved identity.

        Paid plans are limited by the monthly counter only. On the free plan
        an expired trial is reported before an exhausted quota, so a tenant
        whose trial ran out sees TRIAL_EXPIRED even with headroom left.
        """
        now = as_utc(now) or utc_now()
        entitlement = await self.entitlement_service.get_entitlement(resolved, now)
        owner_id = entitlement.identity_id
        used = await self.usage_service.get_usage_for(resolved, now)

        context = dict(
            identity_id=owner_id,
            plan_name=entitlement.plan_name,
            used=used,
            limit=entitlement.query_limit,
        )

        if not entitlement.is_paid and entitlement.trial_expired:
            await self._record_trial_expiry(resolved)
            return self._deny(EntitlementErrorCode.TRIAL_EXPIRED, **context)

        if used >= entitlement.query_limit:
            return self._deny(EntitlementErrorCode.QUERY_LIMIT_EXCEEDED, **context)

        return QuotaDecision.allow(**context)

    async def _record_trial_expiry(self, resolved: ResolvedIdentity) -> None:
        """Persist trial_used the first time an elapsed window is observed."""
        owner = resolved.billing_identity
        if owner.trial_used:
            return
        if await self.primary_repo.mark_trial_used(owner.id):
            log_span_event(
                f"Trial window elapsed for identity {owner.id}, marked as used",
                {"identity_id": owner.id},
            )

    # ========================================================================
    # Transaction gate
    # ========================================================================

    @trace_span
    async def check_transaction_quota(
        self,
        wallet_address: str,
        blockchain_id: str,
        amount,
        now: Optional[datetime] = None,
    ) -> QuotaDecision:
        """Resolve the wallet and decide whether a transaction of ``amount`` fits."""
        proposed = self._parse_amount(amount)
        resolved = await self.resolver.resolve_identity(wallet_address, blockchain_id)
        if resolved is None:
            return QuotaDecision.deny(EntitlementErrorCode.WALLET_NOT_REGISTERED)
        return await self.check_transaction_quota_for(resolved, proposed, now)

    @trace_span
    async def check_transaction_quota_for(
        self,
        resolved: ResolvedIdentity,
        amount,
        now: Optional[datetime] = None,
    ) -> QuotaDecision:
        """
        Transaction gate for an already resolved identity.

        Compares the cumulative month volume including ``amount`` against the
        plan's limit. A plan without a limit always allows.
        """
        proposed = self._parse_amount(amount)
        entitlement = await self.entitlement_service.get_entitlement(resolved, now)

        if entitlement.has_unlimited_transactions:
            return QuotaDecision.allow(
                identity_id=entitlement.identity_id,
                plan_name=entitlement.plan_name,
                proposed_amount=proposed,
            )

        volume = await self.usage_service.get_transaction_volume(
            entitlement.identity_id, now
        )
        context = dict(
            identity_id=entitlement.identity_id,
            plan_name=entitlement.plan_name,
            current_volume=volume,
            proposed_amount=proposed,
            txn_limit=entitlement.txn_limit,
        )

        if volume + proposed > entitlement.txn_limit:
            return self._deny(EntitlementErrorCode.PLAN_TXN_LIMIT_EXCEEDED, **context)

        return QuotaDecision.allow(**context)

    # ========================================================================
    # Helpers
    # ========================================================================

    @staticmethod
    def _parse_amount(amount) -> Decimal:
        try:
            value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        except (InvalidOperation, ValueError) as e:
            raise ValidationError(f"Invalid transaction amount: {amount!r}") from e
        if not value.is_finite() or value <= 0:
            raise ValidationError("Transaction amount must be a positive number")
        if value.normalize().as_tuple().exponent < -2:
            # Stored as NUMERIC(18, 2)
            raise ValidationError("Transaction amount must have at most 2 decimal places")
        return value

    def _deny(self, reason: EntitlementErrorCode, **context) -> QuotaDecision:
        decision = QuotaDecision.deny(reason, **context)
        logger.warning(
            f"Quota denied for identity {decision.identity_id}: {reason.value}",
            extra={
                "identity_id": decision.identity_id,
                "reason": reason.value,
                "plan_name": decision.plan_name.value if decision.plan_name else None,
            },
        )
        return decision

