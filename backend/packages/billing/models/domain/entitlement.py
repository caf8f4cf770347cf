"""
Domain models for entitlement decisions.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from packages.billing.models.domain.enums import EntitlementDenialReason, PlanId
from packages.jobs.models.domain.job import Job


class EntitlementDecision(BaseModel):
    """
    Outcome of evaluating whether an account may post a job right now.

    Denials are values, not exceptions; reason says which one.
    """

    allowed: bool
    reason: Optional[EntitlementDenialReason] = None
    account_id: int
    plan_id: Optional[PlanId] = None
    quota: Optional[int] = None
    usage: Optional[int] = None
    period_end: Optional[datetime] = None

    @property
    def remaining(self) -> Optional[int]:
        if self.quota is None or self.usage is None:
            return None
        return max(0, self.quota - self.usage)

    def get_user_message(self) -> Optional[str]:
        """Actionable message for the presentation layer."""
        if self.allowed:
            return None

        if self.reason == EntitlementDenialReason.NO_SUBSCRIPTION:
            return "No active plan. Choose a plan to start posting jobs."

        if self.reason == EntitlementDenialReason.PLAN_EXPIRED:
            if self.plan_id == PlanId.TRIAL:
                return "Your free trial has ended. Choose a plan to keep posting jobs."
            return "Your plan has expired. Renew or choose a new plan to keep posting jobs."

        return (
            f"You have used all {self.quota:,} job posts included in your plan. "
            "Upgrade your plan to post more."
        )


class JobPostingReservation(BaseModel):
    """Result of the atomic check-and-post: the decision and, if allowed, the new job."""

    decision: EntitlementDecision
    job: Optional[Job] = None

    @property
    def allowed(self) -> bool:
        return self.decision.allowed
