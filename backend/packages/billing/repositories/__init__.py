"""Billing repositories."""

from packages.billing.repositories.subscription_repository import SubscriptionRepository
from packages.billing.repositories.ledger_repository import LedgerRepository

__all__ = [
    "SubscriptionRepository",
    "LedgerRepository",
]
