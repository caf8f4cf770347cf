"""
Service for managing subscriptions.
"""

import math
from typing import Optional, Union
from datetime import datetime, timezone

from common.core.exceptions import NotFoundError
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.accounts.repositories.account_repository import AccountRepository
from packages.billing.models.domain.enums import PlanId
from packages.billing.models.domain.plans import get_plan
from packages.billing.models.domain.subscription import Subscription, SubscriptionSummary
from packages.billing.repositories.subscription_repository import SubscriptionRepository
from packages.billing.services.usage_service import UsageService

logger = get_logger(__name__)


class SubscriptionService:
    """Service for subscription state."""

    def __init__(self):
        self.subscription_repo = SubscriptionRepository()
        self.account_repo = AccountRepository()
        self.usage_service = UsageService()

    @trace_span
    async def get(self, account_id: int) -> Optional[Subscription]:
        return await self.subscription_repo.get_by_account_id(account_id)

    @trace_span
    async def activate(
        self,
        account_id: int,
        plan_id: Union[PlanId, str],
        external_customer_ref: Optional[str],
        session_ref: str,
        now: Optional[datetime] = None,
    ) -> Subscription:
        """
        Replace the account's period with a fresh one for plan_id.

        Only payment confirmation calls this. Quota and extended access are
        copied from the catalog now and stay fixed for the period.
        """
        now = now or datetime.now(timezone.utc)
        plan = get_plan(plan_id)

        subscription = await self.subscription_repo.activate(
            account_id=account_id,
            plan=plan,
            external_customer_ref=external_customer_ref,
            session_ref=session_ref,
            now=now,
        )

        logger.info(
            f"Activated {plan.plan_id.value} for account {account_id} until {subscription.period_end.isoformat()}",
            extra={
                "account_id": account_id,
                "plan_id": plan.plan_id.value,
                "session_ref": session_ref,
            },
        )
        return subscription

    @trace_span
    async def get_subscription_summary(
        self, account_id: int, now: Optional[datetime] = None
    ) -> SubscriptionSummary:
        """
        Plan, period, quota and live usage for an account.

        Raises:
            NotFoundError: If the account has no subscription record
        """
        now = now or datetime.now(timezone.utc)
        subscription = await self.subscription_repo.get_by_account_id(account_id)
        if subscription is None:
            raise NotFoundError(f"No subscription for account {account_id}")

        if subscription.is_trial:
            account = await self.account_repo.get(account_id)
            period_end = account.trial_ends_at if account else None
        else:
            period_end = subscription.period_end

        is_active = subscription.is_active(period_end, now)
        usage = await self.usage_service.count_usage(
            account_id, subscription.period_start, now
        )

        days_until_expiry = None
        if period_end is not None:
            seconds_left = (period_end - now).total_seconds()
            days_until_expiry = max(0, math.ceil(seconds_left / 86400))

        return SubscriptionSummary(
            account_id=account_id,
            plan_id=subscription.plan_id,
            plan_name=get_plan(subscription.plan_id).display_name,
            period_start=subscription.period_start,
            period_end=period_end,
            quota=subscription.quota,
            usage=usage,
            extended_access=subscription.extended_access,
            is_active=is_active,
            days_until_expiry=days_until_expiry,
        )
