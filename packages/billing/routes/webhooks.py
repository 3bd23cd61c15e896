"""
Webhook endpoints for billing events.

Public endpoints authenticated by a shared secret header.
"""

from fastapi import APIRouter, Request

from packages.billing.models.schemas.billing import WebhookAckResponse
from packages.billing.webhooks.payment_webhook import handle_payment_webhook

router = APIRouter()


@router.post("/webhooks/payments", response_model=WebhookAckResponse)
async def payment_webhook(request: Request):
    """
    Receive subscription changes from the payment collaborator.

    No user authentication; the X-Webhook-Secret header is checked internally.
    """
    return await handle_payment_webhook(request)
