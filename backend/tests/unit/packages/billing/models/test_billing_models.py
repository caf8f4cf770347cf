"""
Unit tests for billing domain models: ledger transitions, subscriptions and decisions.
"""

from datetime import timedelta

import pytest

from packages.billing.models.domain.entitlement import EntitlementDecision
from packages.billing.models.domain.enums import (
    EntitlementDenialReason,
    LedgerStatus,
    PlanId,
)
from packages.billing.models.domain.subscription import Subscription
from packages.billing.models.domain.stripe_webhooks import StripeWebhookType

from tests.fixtures import T0


class TestLedgerStatusTransitions:
    @pytest.mark.parametrize(
        "current,target",
        [
            (LedgerStatus.PENDING, LedgerStatus.COMPLETED),
            (LedgerStatus.PENDING, LedgerStatus.FAILED),
            (LedgerStatus.FAILED, LedgerStatus.COMPLETED),
            (LedgerStatus.COMPLETED, LedgerStatus.REFUNDED),
        ],
    )
    def test_allowed(self, current, target):
        assert current.can_transition_to(target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (LedgerStatus.COMPLETED, LedgerStatus.PENDING),
            (LedgerStatus.COMPLETED, LedgerStatus.FAILED),
            (LedgerStatus.FAILED, LedgerStatus.PENDING),
            (LedgerStatus.REFUNDED, LedgerStatus.COMPLETED),
            (LedgerStatus.PENDING, LedgerStatus.REFUNDED),
        ],
    )
    def test_rejected(self, current, target):
        assert not current.can_transition_to(target)

    def test_only_refunded_is_terminal(self):
        assert [s for s in LedgerStatus if s.is_terminal()] == [LedgerStatus.REFUNDED]


def _subscription(**overrides) -> Subscription:
    values = dict(
        id=1,
        account_id=1,
        plan_id=PlanId.SPOTLIGHT,
        period_start=T0,
        period_end=T0 + timedelta(days=30),
        quota=1,
        created_at=T0,
    )
    values.update(overrides)
    return Subscription(**values)


class TestSubscriptionIsActive:
    def test_paid_period_open_until_period_end_inclusive(self):
        sub = _subscription()
        assert sub.is_active(None, T0 + timedelta(days=30))
        assert not sub.is_active(None, T0 + timedelta(days=30, seconds=1))

    def test_paid_without_period_end_is_inactive(self):
        assert not _subscription(period_end=None).is_active(None, T0)

    def test_trial_uses_account_window(self):
        trial = _subscription(plan_id=PlanId.TRIAL, period_end=None, quota=5)
        ends = T0 + timedelta(days=30)
        assert trial.is_active(ends, T0 + timedelta(days=29))
        assert not trial.is_active(ends, T0 + timedelta(days=31))
        assert not trial.is_active(None, T0)


class TestEntitlementDecision:
    def test_remaining(self):
        decision = EntitlementDecision(allowed=True, account_id=1, quota=4, usage=1)
        assert decision.remaining == 3

    def test_remaining_is_none_when_unlimited(self):
        assert EntitlementDecision(allowed=True, account_id=1).remaining is None

    def test_allowed_has_no_message(self):
        assert EntitlementDecision(allowed=True, account_id=1).get_user_message() is None

    def test_messages_are_actionable(self):
        expired_trial = EntitlementDecision(
            allowed=False,
            account_id=1,
            reason=EntitlementDenialReason.PLAN_EXPIRED,
            plan_id=PlanId.TRIAL,
        )
        assert "free trial has ended" in expired_trial.get_user_message()

        exhausted = EntitlementDecision(
            allowed=False,
            account_id=1,
            reason=EntitlementDenialReason.QUOTA_EXHAUSTED,
            plan_id=PlanId.BUNDLE,
            quota=4,
            usage=4,
        )
        assert "all 4 job posts" in exhausted.get_user_message()

        none = EntitlementDecision(
            allowed=False, account_id=1, reason=EntitlementDenialReason.NO_SUBSCRIPTION
        )
        assert "Choose a plan" in none.get_user_message()


class TestStripeWebhookType:
    def test_confirming_types(self):
        assert StripeWebhookType.confirms_payment("checkout.session.completed")
        assert StripeWebhookType.confirms_payment(
            "checkout.session.async_payment_succeeded"
        )
        assert not StripeWebhookType.confirms_payment("invoice.paid")
