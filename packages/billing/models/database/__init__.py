from packages.billing.models.database.subscription import SubscriptionEntity
from packages.billing.models.database.usage import QueryUsageEntity, TransactionEntity

__all__ = ["SubscriptionEntity", "QueryUsageEntity", "TransactionEntity"]
