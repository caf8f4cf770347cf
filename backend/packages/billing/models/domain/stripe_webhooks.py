"""
Domain models for Stripe webhook payloads.

Strongly-typed Pydantic models for the parts of Stripe events billing reads.
"""

from typing import Optional, Any
from enum import Enum
from pydantic import BaseModel, Field


class StripeWebhookType(str, Enum):
    """Stripe webhook event types we act on."""

    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    CHECKOUT_SESSION_ASYNC_PAYMENT_SUCCEEDED = "checkout.session.async_payment_succeeded"

    @classmethod
    def confirms_payment(cls, event_type: str) -> bool:
        return event_type in {member.value for member in cls}


class StripeMetadata(BaseModel):
    """Checkout session metadata (set when the session is created)."""

    account_id: Optional[str] = None
    plan_id: Optional[str] = None


class StripeCheckoutSessionData(BaseModel):
    """Stripe checkout session object."""

    id: str
    customer: Optional[str] = None
    payment_status: str
    status: Optional[str] = None
    amount_total: Optional[int] = None
    currency: Optional[str] = None
    customer_email: Optional[str] = None
    metadata: StripeMetadata = Field(default_factory=StripeMetadata)


class StripeEventData(BaseModel):
    """Stripe event data wrapper."""

    object: dict[str, Any]


class StripeWebhookPayload(BaseModel):
    """Complete Stripe webhook payload. type stays a plain string so new event types still parse."""

    id: str
    type: str
    data: StripeEventData
    created: int
    livemode: bool
