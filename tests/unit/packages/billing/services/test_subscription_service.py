"""
Unit tests for SubscriptionService.
"""

import pytest
from datetime import timedelta

from common.core.exceptions import NotFoundError
from common.utils.clock import utc_now
from packages.billing.models.domain.enums import PlanName
from packages.billing.models.domain.subscription import PaymentNotification
from packages.billing.services.subscription_service import SubscriptionService
from packages.identities.repositories.linked_identity_repository import (
    LinkedIdentityRepository,
)
from packages.identities.repositories.primary_identity_repository import (
    PrimaryIdentityRepository,
)


@pytest.mark.asyncio
class TestApplyPaymentNotification:
    async def test_activates_paid_plan(self, sample_primary_identity, sample_linked_identity):
        service = SubscriptionService()

        subscription = await service.apply_payment_notification(
            PaymentNotification(
                identity_id=sample_primary_identity.id,
                plan_id=PlanName.PRO,
                period_end=utc_now() + timedelta(days=30),
                external_subscription_id="I-PRO-1",
            )
        )

        assert subscription.plan_name == PlanName.PRO
        assert subscription.is_current()

        owner = await PrimaryIdentityRepository().get(sample_primary_identity.id)
        assert owner.trial_used is True
        assert owner.subscription.plan_name == PlanName.PRO

        linked = await LinkedIdentityRepository().get(sample_linked_identity.id)
        assert linked.plan_name == PlanName.PRO

    async def test_latest_notification_wins(self, sample_primary_identity):
        service = SubscriptionService()
        period_end = utc_now() + timedelta(days=30)

        first = await service.apply_payment_notification(
            PaymentNotification(
                identity_id=sample_primary_identity.id,
                plan_id=PlanName.BASIC,
                period_end=period_end,
            )
        )
        second = await service.apply_payment_notification(
            PaymentNotification(
                identity_id=sample_primary_identity.id,
                plan_id=PlanName.PREMIUM,
                period_end=period_end,
            )
        )

        assert second.id == first.id
        assert second.plan_name == PlanName.PREMIUM
        assert (await service.get_by_identity_id(sample_primary_identity.id)).plan_name == PlanName.PREMIUM

    async def test_cancellation_reverts_linked_wallets_to_free(
        self, sample_primary_identity, sample_linked_identity, pro_subscription
    ):
        await SubscriptionService().apply_payment_notification(
            PaymentNotification(
                identity_id=sample_primary_identity.id,
                plan_id=PlanName.PRO,
                period_end=utc_now() + timedelta(days=5),
                active=False,
            )
        )

        linked = await LinkedIdentityRepository().get(sample_linked_identity.id)
        assert linked.plan_name == PlanName.FREE

    async def test_free_plan_does_not_consume_trial(self, sample_primary_identity):
        await SubscriptionService().apply_payment_notification(
            PaymentNotification(
                identity_id=sample_primary_identity.id,
                plan_id=PlanName.FREE,
                period_end=utc_now() + timedelta(days=30),
            )
        )

        owner = await PrimaryIdentityRepository().get(sample_primary_identity.id)
        assert owner.trial_used is False

    async def test_unknown_identity(self):
        with pytest.raises(NotFoundError):
            await SubscriptionService().apply_payment_notification(
                PaymentNotification(
                    identity_id=4242,
                    plan_id=PlanName.PRO,
                    period_end=utc_now() + timedelta(days=30),
                )
            )
