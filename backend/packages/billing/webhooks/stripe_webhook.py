"""
Stripe webhook handler for payment events.

Handles events from Stripe payment platform:
- Checkout session completion (card payments)
- Async payment success (bank debits and other delayed methods)

Every other event type is acknowledged and ignored. The status code tells
Stripe whether to redeliver: 200 for handled or permanently rejected events,
503 for retryable failures, 400 for a bad signature or payload.
"""

import stripe
from fastapi import Request, HTTPException, status
from pydantic import ValidationError

from common.core.config import settings
from common.core.exceptions import LockUnavailableError
from common.core.otel_axiom_exporter import get_logger
from packages.billing.exceptions import BillingError, InvalidEventError
from packages.billing.models.domain.stripe_webhooks import (
    StripeCheckoutSessionData,
    StripeWebhookPayload,
    StripeWebhookType,
)
from packages.billing.services.payment_event_service import PaymentEventService

logger = get_logger(__name__)


async def _verified_payload(request: Request) -> StripeWebhookPayload:
    payload_bytes = await request.body()
    sig_header = request.headers.get("stripe-signature")

    if not sig_header:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing stripe-signature header",
        )

    try:
        stripe.Webhook.construct_event(
            payload_bytes, sig_header, settings.stripe_webhook_secret
        )
    except stripe.SignatureVerificationError as e:
        logger.error(f"Stripe webhook signature verification failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid signature"
        )
    except ValueError as e:
        logger.error(f"Stripe webhook body is not valid JSON: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid webhook payload"
        )

    # Signature checked; parse the same bytes into the typed model
    try:
        return StripeWebhookPayload.model_validate_json(payload_bytes)
    except ValidationError as e:
        logger.error(
            "Invalid Stripe webhook payload", extra={"validation_errors": e.errors()}
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid webhook payload"
        )


async def handle_stripe_webhook(
    request: Request, payment_event_service: PaymentEventService
) -> dict[str, str]:
    """
    Handle incoming webhook from Stripe.

    Validates the webhook signature and routes payment confirmations to the
    payment event service.
    """
    payload = await _verified_payload(request)

    logger.info(
        f"Received Stripe webhook: {payload.type}",
        extra={
            "event_id": payload.id,
            "event_type": payload.type,
            "livemode": payload.livemode,
        },
    )

    if not StripeWebhookType.confirms_payment(payload.type):
        logger.info(f"Unhandled Stripe webhook type: {payload.type}")
        return {"status": "ignored"}

    try:
        session = StripeCheckoutSessionData.model_validate(payload.data.object)
    except ValidationError as e:
        logger.error(
            "Invalid checkout session in Stripe webhook",
            extra={"event_id": payload.id, "validation_errors": e.errors()},
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid webhook payload"
        )

    try:
        outcome = await payment_event_service.handle_confirmed_payment(session.id)
    except InvalidEventError as e:
        # Redelivery cannot fix a session that is unpaid or malformed
        logger.warning(
            f"Rejected Stripe event {payload.id}: {str(e)}",
            extra={"event_id": payload.id, "session_ref": session.id},
        )
        return {"status": "rejected"}
    except (BillingError, LockUnavailableError) as e:
        if e.retryable:
            logger.error(
                f"Retryable failure handling Stripe event {payload.id}: {str(e)}",
                extra={"event_id": payload.id, "session_ref": session.id},
            )
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Webhook processing failed, retry later",
            )
        logger.error(
            f"Rejected Stripe event {payload.id}: {str(e)}",
            extra={"event_id": payload.id, "session_ref": session.id},
        )
        return {"status": "rejected"}

    return {"status": outcome.status.value}
