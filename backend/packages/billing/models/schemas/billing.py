"""
API schemas for billing operations.

Request and response models for billing endpoints.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from packages.billing.models.domain.enums import (
    EntitlementDenialReason,
    LedgerStatus,
    PaymentOutcomeStatus,
    PlanId,
)


# ============================================================================
# Plan Schemas
# ============================================================================


class PlanInfo(BaseModel):
    """Public plan information for pricing pages."""

    plan_id: PlanId
    name: str
    description: str
    price_cents: int
    price_formatted: str
    currency: str
    period_days: int
    quota: Optional[int] = Field(None, description="Job posts per period; null = unlimited")
    extended_access: bool


class PlansResponse(BaseModel):
    plans: list[PlanInfo]


# ============================================================================
# Entitlement Schemas
# ============================================================================


class EntitlementResponse(BaseModel):
    account_id: int
    allowed: bool
    reason: Optional[EntitlementDenialReason] = None
    message: Optional[str] = None
    plan_id: Optional[PlanId] = None
    quota: Optional[int] = None
    usage: Optional[int] = None
    remaining: Optional[int] = None
    period_end: Optional[datetime] = None
    extended_access: bool = False


# ============================================================================
# Subscription Schemas
# ============================================================================


class SubscriptionSummaryResponse(BaseModel):
    account_id: int
    plan_id: PlanId
    plan_name: str
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    quota: Optional[int] = None
    usage: int
    extended_access: bool
    is_active: bool
    days_until_expiry: Optional[int] = None


# ============================================================================
# Ledger Schemas
# ============================================================================


class BillingHistoryItem(BaseModel):
    session_ref: str
    plan_id: PlanId
    amount_cents: int
    currency: str
    description: Optional[str] = None
    status: LedgerStatus
    created_at: datetime


class BillingHistoryResponse(BaseModel):
    account_id: int
    entries: list[BillingHistoryItem]
    limit: int
    offset: int
    # None on the last page
    next_offset: Optional[int] = None


# ============================================================================
# Checkout Confirmation Schemas
# ============================================================================


class CheckoutConfirmRequest(BaseModel):
    """Success-page fallback: the client reports the session it returned from."""

    session_ref: str = Field(..., min_length=1, max_length=255)


class CheckoutConfirmResponse(BaseModel):
    status: PaymentOutcomeStatus
    session_ref: str
    account_id: Optional[int] = None
    plan_id: Optional[PlanId] = None
    period_end: Optional[datetime] = None
