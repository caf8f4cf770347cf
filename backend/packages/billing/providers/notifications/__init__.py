"""Notification publishing - billing domain events for downstream consumers."""

from packages.billing.providers.notifications.publisher import SubscriptionEventPublisher

__all__ = ["SubscriptionEventPublisher"]
