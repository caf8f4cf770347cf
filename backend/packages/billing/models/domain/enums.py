"""
Billing enums - strongly typed enumerations for plans, ledger and entitlement states.
"""

from enum import Enum


class PlanId(str, Enum):
    """
    Closed set of purchasable plans.

    Values match the plan_id carried in checkout session metadata.
    """

    TRIAL = "TRIAL"
    SPOTLIGHT = "SPOTLIGHT"
    BUNDLE = "BUNDLE"
    UNLIMITED = "UNLIMITED"
    NETWORK = "NETWORK"
    NETWORK_QUARTERLY = "NETWORK_QUARTERLY"


class LedgerStatus(str, Enum):
    """
    Billing ledger entry status.

    Flow: pending -> completed | failed, failed -> completed (redelivery),
    completed -> refunded
    """

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"

    def can_transition_to(self, target: "LedgerStatus") -> bool:
        return target in _LEDGER_TRANSITIONS[self]

    def is_terminal(self) -> bool:
        return not _LEDGER_TRANSITIONS[self]


_LEDGER_TRANSITIONS = {
    LedgerStatus.PENDING: frozenset({LedgerStatus.COMPLETED, LedgerStatus.FAILED}),
    LedgerStatus.FAILED: frozenset({LedgerStatus.COMPLETED}),
    LedgerStatus.COMPLETED: frozenset({LedgerStatus.REFUNDED}),
    LedgerStatus.REFUNDED: frozenset(),
}


class EntitlementDenialReason(str, Enum):
    """Why a metered action was refused."""

    NO_SUBSCRIPTION = "no_subscription"
    PLAN_EXPIRED = "plan_expired"
    QUOTA_EXHAUSTED = "quota_exhausted"


class PaymentOutcomeStatus(str, Enum):
    """Result of handling one confirmed-payment delivery."""

    ACTIVATED = "activated"
    ALREADY_PROCESSED = "already_processed"
