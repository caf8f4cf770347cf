from typing import Optional

from packages.billing.providers.payment.interface import PaymentProviderInterface
from packages.billing.providers.payment.stripe_payment import StripePaymentProvider

_payment_provider: Optional[PaymentProviderInterface] = None


def get_payment_provider() -> PaymentProviderInterface:
    """Shared Stripe provider; the SDK client holds connection state."""
    global _payment_provider
    if _payment_provider is None:
        _payment_provider = StripePaymentProvider()
    return _payment_provider
