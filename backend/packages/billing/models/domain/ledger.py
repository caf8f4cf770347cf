"""
Domain models for the billing ledger.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from packages.billing.models.domain.enums import LedgerStatus, PlanId


class LedgerEntry(BaseModel):
    """One purchase attempt, keyed by the payment provider's session reference."""

    id: int
    account_id: int
    session_ref: str
    plan_id: PlanId
    amount_cents: int
    currency: str
    description: Optional[str] = None
    status: LedgerStatus
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LedgerEntryCreateModel(BaseModel):
    """Model for appending a ledger entry."""

    account_id: int
    session_ref: str
    plan_id: PlanId
    amount_cents: int
    currency: str
    description: Optional[str] = None
    status: LedgerStatus = LedgerStatus.PENDING

    class Config:
        use_enum_values = True
        validate_default = True
