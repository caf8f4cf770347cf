"""Domain models for billing."""

from packages.billing.models.domain.enums import (
    PlanId,
    LedgerStatus,
    EntitlementDenialReason,
    PaymentOutcomeStatus,
)
from packages.billing.models.domain.subscription import (
    Subscription,
    SubscriptionSummary,
)
from packages.billing.models.domain.ledger import LedgerEntry, LedgerEntryCreateModel
from packages.billing.models.domain.payment import CheckoutSessionDetails, PaymentOutcome

__all__ = [
    # Enums
    "PlanId",
    "LedgerStatus",
    "EntitlementDenialReason",
    "PaymentOutcomeStatus",
    # Subscription
    "Subscription",
    "SubscriptionSummary",
    # Ledger
    "LedgerEntry",
    "LedgerEntryCreateModel",
    # Payment
    "CheckoutSessionDetails",
    "PaymentOutcome",
]
