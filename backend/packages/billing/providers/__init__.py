"""Billing collaborators: payment verification and activation notifications."""

from packages.billing.providers.notifications.publisher import SubscriptionEventPublisher
from packages.billing.providers.payment.factory import get_payment_provider

__all__ = [
    "SubscriptionEventPublisher",
    "get_payment_provider",
]
