"""Billing repositories."""

from packages.billing.repositories.subscription_repository import SubscriptionRepository
from packages.billing.repositories.usage_repository import QueryUsageRepository
from packages.billing.repositories.transaction_repository import TransactionRepository

__all__ = [
    "SubscriptionRepository",
    "QueryUsageRepository",
    "TransactionRepository",
]
