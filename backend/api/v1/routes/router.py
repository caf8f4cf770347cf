from fastapi import APIRouter, Depends

from packages.accounts.routes import accounts
from packages.auth.dependencies import require_internal_api_key
from packages.billing.routes import billing, webhooks, plans
from packages.jobs.routes import jobs

api_router = APIRouter()

# Webhooks (no auth - signature verified internally)
api_router.include_router(webhooks.router, tags=["webhooks"])

# Plans (no auth - public pricing info)
api_router.include_router(plans.router, prefix="/billing/plans", tags=["billing"])

# Billing routes (require internal API key)
api_router.include_router(
    billing.router,
    prefix="/billing",
    tags=["billing"],
    dependencies=[Depends(require_internal_api_key)],
)

# Metered job posting and account registration (internal API key set on the routers)
api_router.include_router(jobs.router)
api_router.include_router(accounts.router)
