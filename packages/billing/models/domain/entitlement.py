"""
Domain models for computed entitlements.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel

from packages.billing.models.domain.enums import PlanName


class Entitlement(BaseModel):
    """
    Plan, limits, and trial state that apply to an identity right now.

    Recomputed on every request, never cached. Trial fields only carry
    meaning on the free plan.
    """

    identity_id: int  # billing identity (the primary)
    plan_name: PlanName
    query_limit: int
    txn_limit: Optional[Decimal] = None
    max_wallets: int
    trial_active: bool
    trial_days_remaining: int
    trial_expired: bool = False

    @property
    def is_paid(self) -> bool:
        return self.plan_name.is_paid()

    @property
    def has_unlimited_transactions(self) -> bool:
        return self.txn_limit is None
