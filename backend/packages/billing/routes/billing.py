"""
Billing API routes.

Internal endpoints for entitlement, subscription and history lookups, plus
the checkout success-page confirmation.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from common.core.exceptions import LockUnavailableError, NotFoundError
from common.core.otel_axiom_exporter import get_logger
from packages.billing.exceptions import BillingError, InvalidEventError
from packages.billing.models.schemas.billing import (
    BillingHistoryItem,
    BillingHistoryResponse,
    CheckoutConfirmRequest,
    CheckoutConfirmResponse,
    EntitlementResponse,
    SubscriptionSummaryResponse,
)
from packages.billing.routes.dependencies import (
    get_entitlement_service,
    get_ledger_service,
    get_payment_event_service,
    get_subscription_service,
)
from packages.billing.services.entitlement_service import EntitlementService
from packages.billing.services.ledger_service import LedgerService
from packages.billing.services.payment_event_service import PaymentEventService
from packages.billing.services.subscription_service import SubscriptionService

logger = get_logger(__name__)

router = APIRouter()


# ============================================================================
# Entitlement
# ============================================================================


@router.get("/accounts/{account_id}/entitlement", response_model=EntitlementResponse)
async def get_entitlement(
    account_id: int,
    entitlement_service: EntitlementService = Depends(get_entitlement_service),
):
    """
    Can this account post a job right now?

    A denial is a normal 200 response with the reason and a message for the user.
    """
    decision = await entitlement_service.evaluate(account_id)
    extended_access = await entitlement_service.has_extended_access(account_id)

    return EntitlementResponse(
        account_id=account_id,
        allowed=decision.allowed,
        reason=decision.reason,
        message=decision.get_user_message(),
        plan_id=decision.plan_id,
        quota=decision.quota,
        usage=decision.usage,
        remaining=decision.remaining,
        period_end=decision.period_end,
        extended_access=extended_access,
    )


# ============================================================================
# Subscription
# ============================================================================


@router.get(
    "/accounts/{account_id}/subscription", response_model=SubscriptionSummaryResponse
)
async def get_subscription_summary(
    account_id: int,
    subscription_service: SubscriptionService = Depends(get_subscription_service),
):
    try:
        summary = await subscription_service.get_subscription_summary(account_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return SubscriptionSummaryResponse(**summary.model_dump())


# ============================================================================
# Billing History
# ============================================================================


@router.get("/accounts/{account_id}/history", response_model=BillingHistoryResponse)
async def get_billing_history(
    account_id: int,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    ledger_service: LedgerService = Depends(get_ledger_service),
):
    """Purchase attempts for receipts, newest first, one page at a time."""
    # One extra row tells whether another page follows
    entries = await ledger_service.list_billing_history(
        account_id, limit=limit + 1, offset=offset
    )
    has_more = len(entries) > limit
    return BillingHistoryResponse(
        account_id=account_id,
        entries=[
            BillingHistoryItem(**entry.model_dump(include=set(BillingHistoryItem.model_fields)))
            for entry in entries[:limit]
        ],
        limit=limit,
        offset=offset,
        next_offset=offset + limit if has_more else None,
    )


# ============================================================================
# Checkout Confirmation
# ============================================================================


@router.post("/checkout/confirm", response_model=CheckoutConfirmResponse)
async def confirm_checkout(
    request: CheckoutConfirmRequest,
    payment_event_service: PaymentEventService = Depends(get_payment_event_service),
):
    """
    Success-page fallback for checkout completion.

    Safe to call alongside the Stripe webhook: whichever arrives second gets
    already_processed. The session is always re-read from Stripe.
    """
    try:
        outcome = await payment_event_service.handle_confirmed_payment(
            request.session_ref
        )
    except InvalidEventError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (BillingError, LockUnavailableError) as e:
        if e.retryable:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Payment confirmation temporarily unavailable, retry shortly",
            )
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return CheckoutConfirmResponse(**outcome.model_dump())
