"""Billing services."""

from packages.billing.services.entitlement_service import EntitlementService
from packages.billing.services.usage_service import UsageService
from packages.billing.services.quota_service import QuotaService
from packages.billing.services.subscription_service import SubscriptionService
from packages.billing.services.plans_service import PlansService

__all__ = [
    "EntitlementService",
    "UsageService",
    "QuotaService",
    "SubscriptionService",
    "PlansService",
]
