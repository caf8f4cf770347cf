"""
Plan catalog.

Compiled-in and immutable. Every PlanId has exactly one PlanDefinition; the
module refuses to import otherwise.
"""

from typing import Optional, Union
from pydantic import BaseModel

from packages.billing.exceptions import PlanNotFoundError
from packages.billing.models.domain.enums import PlanId


class PlanDefinition(BaseModel):
    """One purchasable plan. quota=None means unlimited."""

    plan_id: PlanId
    display_name: str
    description: str
    quota: Optional[int]
    period_days: int
    price_cents: int
    currency: str = "usd"
    grants_extended_access: bool = False
    is_free_trial: bool = False

    class Config:
        frozen = True

    @property
    def is_unlimited(self) -> bool:
        return self.quota is None

    @property
    def price_formatted(self) -> str:
        return f"${self.price_cents / 100:,.2f}"


PLAN_CATALOG: dict[PlanId, PlanDefinition] = {
    PlanId.TRIAL: PlanDefinition(
        plan_id=PlanId.TRIAL,
        display_name="30-Day Trial",
        description="Up to 5 job posts during your first 30 days",
        quota=5,
        period_days=30,
        price_cents=0,
        is_free_trial=True,
    ),
    PlanId.SPOTLIGHT: PlanDefinition(
        plan_id=PlanId.SPOTLIGHT,
        display_name="Spotlight",
        description="1 job post within 30 days",
        quota=1,
        period_days=30,
        price_cents=25_000,
    ),
    PlanId.BUNDLE: PlanDefinition(
        plan_id=PlanId.BUNDLE,
        display_name="Hiring Bundle",
        description="4 job posts within 30 days",
        quota=4,
        period_days=30,
        price_cents=75_000,
    ),
    PlanId.UNLIMITED: PlanDefinition(
        plan_id=PlanId.UNLIMITED,
        display_name="Unlimited (Annual)",
        description="Unlimited job posting for 1 year",
        quota=None,
        period_days=365,
        price_cents=150_000,
    ),
    PlanId.NETWORK: PlanDefinition(
        plan_id=PlanId.NETWORK,
        display_name="Network Access Membership (Annual)",
        description="Annual Network Access: unlimited posting, full profiles and direct messaging",
        quota=None,
        period_days=365,
        price_cents=1_750_000,
        grants_extended_access=True,
    ),
    PlanId.NETWORK_QUARTERLY: PlanDefinition(
        plan_id=PlanId.NETWORK_QUARTERLY,
        display_name="Network Access Membership (Quarterly)",
        description="Quarterly Network Access: unlimited posting, full profiles and direct messaging",
        quota=None,
        period_days=90,
        price_cents=500_000,
        grants_extended_access=True,
    ),
}


def _check_catalog(catalog: dict[PlanId, PlanDefinition]) -> None:
    missing = set(PlanId) - set(catalog)
    if missing:
        raise RuntimeError(
            f"Plan catalog missing definitions for: {sorted(p.value for p in missing)}"
        )
    for key, plan in catalog.items():
        if key != plan.plan_id:
            raise RuntimeError(f"Plan catalog key {key.value} holds {plan.plan_id.value}")


_check_catalog(PLAN_CATALOG)


def get_plan(plan_id: Union[PlanId, str]) -> PlanDefinition:
    """
    Look up a plan by id.

    Raises:
        PlanNotFoundError: If plan_id is not a known plan
    """
    try:
        key = PlanId(plan_id)
    except ValueError:
        raise PlanNotFoundError(f"Unknown plan: {plan_id}")
    return PLAN_CATALOG[key]


def list_plans(include_trial: bool = False) -> list[PlanDefinition]:
    """Plans in display order; the trial is never sold so it is hidden by default."""
    return [
        plan
        for plan in PLAN_CATALOG.values()
        if include_trial or not plan.is_free_trial
    ]
