"""
Service for entitlement decisions and the metered job-posting write.

This is the critical service that prevents posting beyond what was purchased.
"""

from datetime import datetime, timezone
from typing import Optional

from common.core.config import settings
from common.core.otel_axiom_exporter import trace_span, get_logger
from common.db.scoped import transaction
from common.providers.locking.factory import get_lock_provider
from common.providers.locking.interface import DistributedLockInterface
from packages.accounts.repositories.account_repository import AccountRepository
from packages.billing.models.domain.entitlement import (
    EntitlementDecision,
    JobPostingReservation,
)
from packages.billing.models.domain.enums import EntitlementDenialReason
from packages.billing.models.domain.subscription import Subscription
from packages.billing.repositories.subscription_repository import SubscriptionRepository
from packages.billing.services.usage_service import UsageService
from packages.jobs.models.domain.job import JobCreateModel
from packages.jobs.repositories.job_repository import JobRepository

logger = get_logger(__name__)


def account_lock_key(account_id: int) -> str:
    return f"billing:account:{account_id}"


class EntitlementService:
    """Service for entitlement enforcement."""

    def __init__(self, lock_provider: Optional[DistributedLockInterface] = None):
        self.subscription_repo = SubscriptionRepository()
        self.account_repo = AccountRepository()
        self.job_repo = JobRepository()
        self.usage_service = UsageService()
        self.lock_provider = lock_provider or get_lock_provider()

    async def _trial_ends_at(self, subscription: Subscription) -> Optional[datetime]:
        if not subscription.is_trial:
            return None
        account = await self.account_repo.get(subscription.account_id)
        return account.trial_ends_at if account else None

    async def _decide(
        self,
        account_id: int,
        subscription: Optional[Subscription],
        now: datetime,
    ) -> EntitlementDecision:
        if subscription is None:
            return EntitlementDecision(
                allowed=False,
                reason=EntitlementDenialReason.NO_SUBSCRIPTION,
                account_id=account_id,
            )

        trial_ends_at = await self._trial_ends_at(subscription)
        period_end = trial_ends_at if subscription.is_trial else subscription.period_end

        if not subscription.is_active(trial_ends_at, now):
            return EntitlementDecision(
                allowed=False,
                reason=EntitlementDenialReason.PLAN_EXPIRED,
                account_id=account_id,
                plan_id=subscription.plan_id,
                quota=subscription.quota,
                period_end=period_end,
            )

        if subscription.quota is None:
            return EntitlementDecision(
                allowed=True,
                account_id=account_id,
                plan_id=subscription.plan_id,
                period_end=period_end,
            )

        usage = await self.usage_service.count_usage(
            account_id, subscription.period_start, now
        )
        allowed = usage < subscription.quota
        if not allowed:
            logger.warning(
                f"Account {account_id} exhausted job posting quota",
                extra={"account_id": account_id, "usage": usage, "quota": subscription.quota},
            )

        return EntitlementDecision(
            allowed=allowed,
            reason=None if allowed else EntitlementDenialReason.QUOTA_EXHAUSTED,
            account_id=account_id,
            plan_id=subscription.plan_id,
            quota=subscription.quota,
            usage=usage,
            period_end=period_end,
        )

    @trace_span
    async def evaluate(
        self, account_id: int, now: Optional[datetime] = None
    ) -> EntitlementDecision:
        """
        Decide whether the account may post a job now.

        Read-only: it reserves nothing. Use reserve_job_posting for the write.
        """
        now = now or datetime.now(timezone.utc)
        subscription = await self.subscription_repo.get_by_account_id(account_id)
        return await self._decide(account_id, subscription, now)

    @trace_span
    async def can_perform_action(
        self, account_id: int, now: Optional[datetime] = None
    ) -> bool:
        decision = await self.evaluate(account_id, now)
        return decision.allowed

    @trace_span
    async def has_extended_access(
        self, account_id: int, now: Optional[datetime] = None
    ) -> bool:
        """Network-style access: an open period whose plan granted it at activation."""
        now = now or datetime.now(timezone.utc)
        subscription = await self.subscription_repo.get_by_account_id(account_id)
        if subscription is None or not subscription.extended_access:
            return False
        trial_ends_at = await self._trial_ends_at(subscription)
        return subscription.is_active(trial_ends_at, now)

    @trace_span
    async def reserve_job_posting(
        self,
        account_id: int,
        title: str,
        expires_at: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> JobPostingReservation:
        """
        Check entitlement and insert the job as one unit.

        The per-account lock serializes posters across processes and the
        subscription row lock serializes them in the database, so two
        concurrent requests can never both see the last free slot.

        Raises:
            LockUnavailableError: If the account lock is not acquired in time
        """
        now = now or datetime.now(timezone.utc)

        async with self.lock_provider.hold(
            account_lock_key(account_id),
            lock_ttl_seconds=settings.lock_ttl_seconds,
            acquire_timeout_seconds=settings.lock_acquire_timeout_seconds,
        ):
            async with transaction():
                subscription = await self.subscription_repo.get_for_update(account_id)
                decision = await self._decide(account_id, subscription, now)
                if not decision.allowed:
                    return JobPostingReservation(decision=decision)

                job = await self.job_repo.create(
                    JobCreateModel(
                        account_id=account_id,
                        title=title,
                        expires_at=expires_at,
                        created_at=now,
                    )
                )

        if decision.usage is not None:
            decision = decision.model_copy(update={"usage": decision.usage + 1})

        logger.info(
            f"Account {account_id} posted job {job.id}",
            extra={
                "account_id": account_id,
                "job_id": job.id,
                "plan_id": decision.plan_id.value if decision.plan_id else None,
                "remaining": decision.remaining,
            },
        )
        return JobPostingReservation(decision=decision, job=job)
