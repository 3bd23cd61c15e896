"""Domain models for billing."""

from packages.billing.models.domain.enums import (
    PlanName,
    PaymentProvider,
    TransactionStatus,
    TransactionType,
    EntitlementErrorCode,
)
from packages.billing.models.domain.plans import Plan, get_plan
from packages.billing.models.domain.subscription import (
    Subscription,
    SubscriptionCreateModel,
    PaymentNotification,
)
from packages.billing.models.domain.entitlement import Entitlement
from packages.billing.models.domain.usage import (
    QuotaDecision,
    QueryUsage,
    Transaction,
    TransactionCreateModel,
    UsageStats,
)

__all__ = [
    # Enums
    "PlanName",
    "PaymentProvider",
    "TransactionStatus",
    "TransactionType",
    "EntitlementErrorCode",
    # Plans
    "Plan",
    "get_plan",
    # Subscription
    "Subscription",
    "SubscriptionCreateModel",
    "PaymentNotification",
    # Entitlement
    "Entitlement",
    # Usage
    "QuotaDecision",
    "QueryUsage",
    "Transaction",
    "TransactionCreateModel",
    "UsageStats",
]
