"""
Service for applying subscription changes pushed by the payment collaborator.
"""

from typing import Optional

from common.core.exceptions import NotFoundError
from common.core.telemetry import trace_span, get_logger
from common.db.scoped import transaction
from packages.billing.models.domain.enums import PlanName
from packages.billing.models.domain.subscription import (
    PaymentNotification,
    Subscription,
    SubscriptionCreateModel,
)
from packages.billing.repositories.subscription_repository import SubscriptionRepository
from packages.identities.repositories.primary_identity_repository import (
    PrimaryIdentityRepository,
)
from packages.identities.repositories.linked_identity_repository import (
    LinkedIdentityRepository,
)

logger = get_logger(__name__)


class SubscriptionService:
    """Service for subscription state of primary identities."""

    def __init__(self):
        self.subscription_repo = SubscriptionRepository()
        self.primary_repo = PrimaryIdentityRepository()
        self.linked_repo = LinkedIdentityRepository()

    @trace_span
    async def get_by_identity_id(self, identity_id: int) -> Optional[Subscription]:
        """Get the subscription of a primary identity. Never cached."""
        return await self.subscription_repo.get_by_identity_id(identity_id)

    @trace_span
    async def apply_payment_notification(
        self, notification: PaymentNotification
    ) -> Subscription:
        """
        Apply a {identity, plan, period end} notification.

        Runs in one transaction:
        - upsert the subscription row (latest notification wins)
        - consume the trial when a paid plan is activated
        - copy the resulting plan name onto the owner's linked wallets

        Raises:
            NotFoundError: If the identity is not a registered primary
        """
        logger.info(
            f"Applying {notification.provider.value} notification for identity {notification.identity_id}: "
            f"plan={notification.plan_id.value} active={notification.active}",
            extra={
                "identity_id": notification.identity_id,
                "plan_name": notification.plan_id.value,
                "active": notification.active,
            },
        )

        async with transaction():
            identity = await self.primary_repo.get(notification.identity_id)
            if identity is None:
                raise NotFoundError(
                    f"Primary identity {notification.identity_id} not found"
                )

            previous = identity.subscription
            subscription = await self.subscription_repo.upsert_for_identity(
                SubscriptionCreateModel(
                    identity_id=identity.id,
                    plan_name=notification.plan_id,
                    is_active=notification.active,
                    payment_provider=notification.provider,
                    external_subscription_id=notification.external_subscription_id,
                    current_period_end=notification.period_end,
                )
            )

            if subscription.is_current() and subscription.plan_name.is_paid():
                await self.primary_repo.mark_trial_used(identity.id)

            effective = (
                subscription.plan_name if subscription.is_current() else PlanName.FREE
            )
            updated_wallets = await self.linked_repo.set_plan_name_for_parent(
                identity.id, effective
            )

        logger.info(
            f"Subscription {subscription.id} for identity {identity.id} now {effective.value}",
            extra={
                "subscription_id": subscription.id,
                "identity_id": identity.id,
                "old_plan": previous.plan_name.value if previous else None,
                "new_plan": effective.value,
                "linked_wallets_updated": updated_wallets,
            },
        )
        return subscription
