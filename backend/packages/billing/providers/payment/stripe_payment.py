"""
Stripe implementation of payment provider.
"""

import asyncio
from typing import Optional

import stripe
from pydantic import ValidationError

from common.core.config import settings
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.billing.exceptions import InvalidEventError, TransientProviderError
from packages.billing.models.domain.payment import CheckoutSessionDetails
from packages.billing.models.domain.stripe_webhooks import StripeCheckoutSessionData
from packages.billing.providers.payment.interface import PaymentProviderInterface

logger = get_logger(__name__)


def _parse_account_id(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


class StripePaymentProvider(PaymentProviderInterface):
    """Stripe-based payment implementation."""

    def __init__(self, timeout_seconds: Optional[float] = None):
        """Initialize Stripe with API credentials."""
        stripe.api_key = settings.stripe_secret_key
        self.timeout_seconds = (
            timeout_seconds
            if timeout_seconds is not None
            else settings.payment_provider_timeout_seconds
        )

    @trace_span
    async def retrieve_checkout_session(self, session_ref: str) -> CheckoutSessionDetails:
        # The SDK is blocking; run it off the loop and bound the wait
        try:
            session = await asyncio.wait_for(
                asyncio.to_thread(stripe.checkout.Session.retrieve, session_ref),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Timed out retrieving checkout session after {self.timeout_seconds}s",
                extra={"session_ref": session_ref},
            )
            raise TransientProviderError(
                f"Timed out retrieving checkout session {session_ref}"
            )
        except stripe.InvalidRequestError as e:
            logger.error(
                f"Stripe rejected checkout session lookup: {str(e)}",
                extra={"session_ref": session_ref, "error": str(e)},
            )
            raise InvalidEventError(f"Unknown checkout session {session_ref}")
        except stripe.StripeError as e:
            logger.error(
                f"Failed to retrieve checkout session: {str(e)}",
                extra={"session_ref": session_ref, "error": str(e)},
            )
            raise TransientProviderError(
                f"Payment provider error for session {session_ref}: {e}"
            )

        try:
            data = StripeCheckoutSessionData.model_validate(session.to_dict())
        except ValidationError as e:
            raise InvalidEventError(f"Malformed checkout session {session_ref}: {e}")

        return CheckoutSessionDetails(
            session_ref=data.id,
            payment_status=data.payment_status,
            account_id=_parse_account_id(data.metadata.account_id),
            plan_id=data.metadata.plan_id,
            customer_ref=data.customer,
            amount_total=data.amount_total,
            currency=data.currency,
        )

    @trace_span
    async def health_check(self) -> bool:
        """Check Stripe health."""
        try:
            await asyncio.wait_for(
                asyncio.to_thread(stripe.Account.retrieve),
                timeout=self.timeout_seconds,
            )
            return True
        except (asyncio.TimeoutError, stripe.StripeError) as e:
            logger.error(f"Payment health check failed: {e}")
            return False
