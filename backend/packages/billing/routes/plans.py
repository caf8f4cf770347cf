"""
Plans API routes.

Public endpoint for retrieving purchasable plans.
"""

from fastapi import APIRouter

from packages.billing.models.domain.plans import list_plans
from packages.billing.models.schemas.billing import PlanInfo, PlansResponse

router = APIRouter()


@router.get("", response_model=PlansResponse)
async def get_plans():
    """
    Get all purchasable plans.

    Served from the compiled-in catalog. Public (no auth) for pricing pages.
    """
    return PlansResponse(
        plans=[
            PlanInfo(
                plan_id=plan.plan_id,
                name=plan.display_name,
                description=plan.description,
                price_cents=plan.price_cents,
                price_formatted=plan.price_formatted,
                currency=plan.currency,
                period_days=plan.period_days,
                quota=plan.quota,
                extended_access=plan.grants_extended_access,
            )
            for plan in list_plans()
        ]
    )
