"""
Interface for payment providers.

Abstracts payment verification away from specific platforms (Stripe, PayPal, etc.)
"""

from abc import ABC, abstractmethod

from packages.billing.models.domain.payment import CheckoutSessionDetails


class PaymentProviderInterface(ABC):
    """Abstract interface for payment providers."""

    @abstractmethod
    async def retrieve_checkout_session(self, session_ref: str) -> CheckoutSessionDetails:
        """
        Fetch the canonical state of a checkout session.

        This is the only trusted source for payment facts; callers never use
        amounts or plan ids supplied by the client.

        Args:
            session_ref: Provider session reference

        Returns:
            CheckoutSessionDetails

        Raises:
            TransientProviderError: Timeout or network failure (retryable)
            InvalidEventError: Provider does not know this session
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check that the provider is reachable with the configured credentials."""
        pass
