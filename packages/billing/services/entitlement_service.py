"""
Service for computing effective entitlements.
"""

from datetime import datetime
from typing import Optional

from common.core.config import settings
from common.core.telemetry import trace_span, get_logger
from common.utils.clock import as_utc, utc_now
from packages.billing.models.domain.entitlement import Entitlement
from packages.billing.models.domain.enums import PlanName
from packages.billing.models.domain.plans import get_plan
from packages.identities.models.domain.identity import (
    PrimaryIdentity,
    ResolvedIdentity,
)

logger = get_logger(__name__)


class EntitlementService:
    """
    Derives plan, limits, and trial state for a resolved identity.

    Nothing is cached: subscription expiry and the trial window are judged
    against the clock on every call.
    """

    def __init__(self, trial_days: Optional[int] = None):
        self.trial_days = trial_days if trial_days is not None else settings.trial_days

    def effective_plan(
        self, identity: PrimaryIdentity, now: Optional[datetime] = None
    ) -> PlanName:
        """Subscription plan while it is active and unexpired, else free."""
        subscription = identity.subscription
        if subscription is not None and subscription.is_current(now):
            return subscription.plan_name
        return PlanName.FREE

    @trace_span
    async def get_entitlement(
        self, resolved: ResolvedIdentity, now: Optional[datetime] = None
    ) -> Entitlement:
        """
        Compute the entitlement of a resolved identity.

        Linked identities get their parent's entitlement; the parent is a
        primary by construction so this never recurses further.
        """
        return self.compute_for_primary(resolved.billing_identity, now)

    def compute_for_primary(
        self, identity: PrimaryIdentity, now: Optional[datetime] = None
    ) -> Entitlement:
        now = as_utc(now) or utc_now()
        plan = get_plan(self.effective_plan(identity, now))

        trial_active = False
        trial_days_remaining = 0
        trial_expired = False
        if not plan.name.is_paid():
            trial = identity.trial
            trial_active = trial.is_active(self.trial_days, now)
            trial_days_remaining = trial.days_remaining(self.trial_days, now)
            trial_expired = trial.has_expired(self.trial_days, now)

        entitlement = Entitlement(
            identity_id=identity.id,
            plan_name=plan.name,
            query_limit=plan.query_limit,
            txn_limit=plan.txn_limit,
            max_wallets=plan.max_wallets,
            trial_active=trial_active,
            trial_days_remaining=trial_days_remaining,
            trial_expired=trial_expired,
        )

        logger.debug(
            f"Entitlement for identity {identity.id}: {plan.name.value}",
            extra={
                "identity_id": identity.id,
                "plan_name": plan.name.value,
                "trial_active": trial_active,
            },
        )
        return entitlement
