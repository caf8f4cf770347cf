"""
Unit tests for SubscriptionService.
"""

from datetime import timedelta

import pytest

from common.core.exceptions import NotFoundError
from packages.billing.models.domain.enums import PlanId
from packages.billing.services.entitlement_service import EntitlementService
from packages.billing.services.subscription_service import SubscriptionService

from tests.fixtures import T0


@pytest.mark.asyncio
class TestSubscriptionSummary:
    async def test_trial_summary(self, sample_account):
        now = T0 + timedelta(days=10, hours=1)
        await EntitlementService().reserve_job_posting(
            sample_account.id, "Trial post", now=T0 + timedelta(days=1)
        )

        summary = await SubscriptionService().get_subscription_summary(
            sample_account.id, now=now
        )

        assert summary.plan_id == PlanId.TRIAL
        assert summary.plan_name == "30-Day Trial"
        assert summary.period_end == T0 + timedelta(days=30)
        assert summary.quota == 5
        assert summary.usage == 1
        assert summary.is_active is True
        assert summary.days_until_expiry == 20

    async def test_paid_summary_after_expiry(self, sample_account):
        await SubscriptionService().activate(
            sample_account.id, PlanId.NETWORK, "cus_1", "sess_1", now=T0
        )

        summary = await SubscriptionService().get_subscription_summary(
            sample_account.id, now=T0 + timedelta(days=400)
        )

        assert summary.plan_id == PlanId.NETWORK
        assert summary.extended_access is True
        assert summary.quota is None
        assert summary.is_active is False
        assert summary.days_until_expiry == 0

    async def test_missing_subscription(self):
        with pytest.raises(NotFoundError):
            await SubscriptionService().get_subscription_summary(4242, now=T0)

    async def test_activate_accepts_plan_id_string(self, sample_account):
        sub = await SubscriptionService().activate(
            sample_account.id, "SPOTLIGHT", None, "sess_str", now=T0
        )
        assert sub.plan_id == PlanId.SPOTLIGHT
        assert sub.external_customer_ref is None
