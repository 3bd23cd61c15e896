"""
Payment collaborator webhook handler.

The payment collaborator pushes {identity_id, plan_id, period_end} whenever
a subscription starts, renews, lapses, or is cancelled. This service never
calls out to it.
"""

import hmac
import json

from fastapi import Request, HTTPException, status
from pydantic import ValidationError

from common.core.config import settings
from common.core.exceptions import NotFoundError
from common.core.telemetry import get_logger
from packages.billing.models.domain.subscription import PaymentNotification
from packages.billing.models.schemas.billing import WebhookAckResponse
from packages.billing.services.subscription_service import SubscriptionService

logger = get_logger(__name__)

WEBHOOK_SECRET_HEADER = "x-webhook-secret"


def _verify_secret(request: Request) -> None:
    provided = request.headers.get(WEBHOOK_SECRET_HEADER)
    if not provided:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing webhook secret header",
        )

    expected = settings.payment_webhook_secret
    if not expected or not hmac.compare_digest(
        provided.encode("utf-8"), expected.encode("utf-8")
    ):
        logger.error("Payment webhook secret verification failed")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid webhook secret"
        )


async def handle_payment_webhook(request: Request) -> WebhookAckResponse:
    """
    Handle a subscription notification.

    Authenticates the shared secret, validates the payload, and applies it.
    """
    _verify_secret(request)

    try:
        payload = json.loads(await request.body())
        notification = PaymentNotification.model_validate(payload)
    except json.JSONDecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON body"
        )
    except ValidationError as e:
        logger.error(
            "Invalid payment webhook payload", extra={"validation_errors": e.errors()}
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid webhook payload"
        )

    try:
        subscription = await SubscriptionService().apply_payment_notification(
            notification
        )
    except NotFoundError as e:
        logger.warning(str(e), extra={"identity_id": notification.identity_id})
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return WebhookAckResponse(
        subscription_id=subscription.id,
        plan_name=subscription.plan_name,
        is_active=subscription.is_active,
    )
