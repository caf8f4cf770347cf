"""
Domain models for payment confirmation handling.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from packages.billing.models.domain.enums import PaymentOutcomeStatus, PlanId


class CheckoutSessionDetails(BaseModel):
    """
    Canonical checkout session as reported by the payment provider.

    account_id and plan_id come from session metadata and are None when the
    session was created without them.
    """

    session_ref: str
    payment_status: str
    account_id: Optional[int] = None
    plan_id: Optional[str] = None
    customer_ref: Optional[str] = None
    amount_total: Optional[int] = None
    currency: Optional[str] = None

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "paid"


class PaymentOutcome(BaseModel):
    """Successful result of handle_confirmed_payment."""

    status: PaymentOutcomeStatus
    session_ref: str
    account_id: Optional[int] = None
    plan_id: Optional[PlanId] = None
    period_end: Optional[datetime] = None
