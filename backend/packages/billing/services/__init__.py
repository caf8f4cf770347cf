"""Billing services."""

from packages.billing.services.entitlement_service import EntitlementService
from packages.billing.services.ledger_service import LedgerService
from packages.billing.services.payment_event_service import PaymentEventService
from packages.billing.services.reconciliation_service import ReconciliationService
from packages.billing.services.subscription_service import SubscriptionService
from packages.billing.services.usage_service import UsageService

__all__ = [
    "EntitlementService",
    "LedgerService",
    "PaymentEventService",
    "ReconciliationService",
    "SubscriptionService",
    "UsageService",
]
