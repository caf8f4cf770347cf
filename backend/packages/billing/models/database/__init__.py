"""Database models for billing."""

from packages.billing.models.database.subscription import SubscriptionEntity
from packages.billing.models.database.ledger import LedgerEntryEntity

__all__ = [
    "SubscriptionEntity",
    "LedgerEntryEntity",
]
