"""
Job posting routes.

The metered write: a job is only inserted when the account's entitlement
allows it, checked and written as one unit.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from common.core.otel_axiom_exporter import get_logger
from packages.auth.dependencies import require_internal_api_key
from packages.billing.models.domain.enums import EntitlementDenialReason
from packages.billing.routes.dependencies import get_entitlement_service
from packages.billing.services.entitlement_service import EntitlementService
from packages.jobs.models.schemas.job import JobCreate, JobResponse

logger = get_logger(__name__)

router = APIRouter(
    prefix="/jobs",
    tags=["jobs"],
    dependencies=[Depends(require_internal_api_key)],
)

_DENIAL_STATUS = {
    EntitlementDenialReason.NO_SUBSCRIPTION: status.HTTP_402_PAYMENT_REQUIRED,
    EntitlementDenialReason.PLAN_EXPIRED: status.HTTP_402_PAYMENT_REQUIRED,
    EntitlementDenialReason.QUOTA_EXHAUSTED: status.HTTP_429_TOO_MANY_REQUESTS,
}


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    job_data: JobCreate,
    entitlement_service: EntitlementService = Depends(get_entitlement_service),
):
    """
    Post a job for an account.

    402 when the account has no open plan, 429 when the plan's quota is used up.
    """
    reservation = await entitlement_service.reserve_job_posting(
        account_id=job_data.account_id,
        title=job_data.title,
        expires_at=job_data.expires_at,
    )

    if not reservation.allowed:
        decision = reservation.decision
        logger.info(
            f"Job posting denied for account {job_data.account_id}: {decision.reason.value}",
            extra={"account_id": job_data.account_id, "reason": decision.reason.value},
        )
        raise HTTPException(
            status_code=_DENIAL_STATUS[decision.reason],
            detail=decision.get_user_message(),
        )

    job = reservation.job
    return JobResponse(
        id=job.id,
        account_id=job.account_id,
        title=job.title,
        status=job.status,
        created_at=job.created_at,
        expires_at=job.expires_at,
        remaining_quota=reservation.decision.remaining,
    )
