"""FastAPI dependency providers for billing services; overridden in tests."""

from packages.billing.services.entitlement_service import EntitlementService
from packages.billing.services.ledger_service import LedgerService
from packages.billing.services.payment_event_service import PaymentEventService
from packages.billing.services.subscription_service import SubscriptionService


def get_entitlement_service() -> EntitlementService:
    return EntitlementService()


def get_subscription_service() -> SubscriptionService:
    return SubscriptionService()


def get_ledger_service() -> LedgerService:
    return LedgerService()


def get_payment_event_service() -> PaymentEventService:
    return PaymentEventService()
