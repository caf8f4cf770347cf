"""Queue names for billing domain events."""

from enum import StrEnum


class QueueName(StrEnum):
    # Consumed by receipts and CRM sync
    SUBSCRIPTION_EVENTS = "billing_subscription_events"
