"""
Domain models for subscriptions.
"""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel

from packages.billing.models.domain.enums import PlanId


class Subscription(BaseModel):
    """
    Account subscription domain model.

    One per account. quota and extended_access are copies taken from the plan
    catalog at activation, so later catalog edits do not touch a running period.
    period_end is None only for the implicit trial, whose end comes from the
    account's creation time.
    """

    id: int
    account_id: int
    plan_id: PlanId

    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None

    quota: Optional[int] = None
    extended_access: bool = False

    external_customer_ref: Optional[str] = None
    last_session_ref: Optional[str] = None

    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def is_trial(self) -> bool:
        return self.plan_id == PlanId.TRIAL

    def is_active(
        self, trial_ends_at: Optional[datetime], now: Optional[datetime] = None
    ) -> bool:
        """
        Whether the current period is open.

        Trial: open until trial_ends_at (computed from the account).
        Paid: open while period_end is set and not yet passed.
        """
        now = now or datetime.now(timezone.utc)
        if self.is_trial:
            return trial_ends_at is not None and now <= trial_ends_at
        return self.period_end is not None and now <= self.period_end


class SubscriptionSummary(BaseModel):
    """Read model for the account billing page."""

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
