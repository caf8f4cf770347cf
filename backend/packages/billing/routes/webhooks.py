"""
Webhook endpoints for billing events.

Public endpoints (no auth required) for Stripe webhooks.
"""

from fastapi import APIRouter, Depends, Request

from packages.billing.routes.dependencies import get_payment_event_service
from packages.billing.services.payment_event_service import PaymentEventService
from packages.billing.webhooks.stripe_webhook import handle_stripe_webhook

router = APIRouter()


@router.post("/webhooks/stripe")
async def stripe_webhook(
    request: Request,
    payment_event_service: PaymentEventService = Depends(get_payment_event_service),
) -> dict[str, str]:
    """
    Receive webhook events from Stripe payment platform.

    No authentication required - webhook signature validated internally.
    """
    return await handle_stripe_webhook(request, payment_event_service)
