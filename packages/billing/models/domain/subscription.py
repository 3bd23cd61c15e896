"""
Domain models for subscriptions.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, field_validator

from common.utils.clock import as_utc, utc_now
from packages.billing.models.domain.enums import PlanName, PaymentProvider


class Subscription(BaseModel):
    """
    Paid plan attached to a primary identity.

    Written only by payment notifications. Whether it still applies is
    decided at read time against ``current_period_end``.
    """

    id: int
    identity_id: int

    plan_name: PlanName
    is_active: bool

    payment_provider: PaymentProvider = PaymentProvider.PAYPAL
    external_subscription_id: Optional[str] = None

    current_period_end: datetime

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("current_period_end", "created_at", "updated_at", mode="after")
    @classmethod
    def _to_utc(cls, v):
        return as_utc(v)

    def is_current(self, now: Optional[datetime] = None) -> bool:
        """True while the subscription is active and its period has not ended."""
        now = as_utc(now) or utc_now()
        return self.is_active and now < self.current_period_end


class SubscriptionCreateModel(BaseModel):
    """Model for creating a subscription row."""

    class Config:
        use_enum_values = True
        validate_default = True

    identity_id: int
    plan_name: PlanName
    is_active: bool = True
    payment_provider: PaymentProvider = PaymentProvider.PAYPAL
    external_subscription_id: Optional[str] = None
    current_period_end: datetime
