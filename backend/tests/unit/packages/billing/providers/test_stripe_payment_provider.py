"""
Unit tests for the Stripe payment provider, with the SDK patched out.
"""

import time
from unittest.mock import MagicMock, patch

import pytest
import stripe

from packages.billing.exceptions import InvalidEventError, TransientProviderError
from packages.billing.providers.payment.stripe_payment import StripePaymentProvider


def _stripe_session(**overrides):
    data = {
        "id": "cs_test_123",
        "object": "checkout.session",
        "payment_status": "paid",
        "status": "complete",
        "customer": "cus_abc",
        "amount_total": 75_000,
        "currency": "usd",
        "customer_email": "talent@acme.example.com",
        "metadata": {"account_id": "42", "plan_id": "BUNDLE"},
    }
    data.update(overrides)
    session = MagicMock()
    session.to_dict.return_value = data
    return session


@pytest.mark.asyncio
class TestStripePaymentProvider:
    async def test_maps_checkout_session(self):
        with patch.object(
            stripe.checkout.Session, "retrieve", return_value=_stripe_session()
        ) as retrieve:
            details = await StripePaymentProvider().retrieve_checkout_session("cs_test_123")

        retrieve.assert_called_once_with("cs_test_123")
        assert details.session_ref == "cs_test_123"
        assert details.is_paid
        assert details.account_id == 42
        assert details.plan_id == "BUNDLE"
        assert details.customer_ref == "cus_abc"
        assert details.amount_total == 75_000

    async def test_missing_or_garbled_metadata(self):
        with patch.object(
            stripe.checkout.Session,
            "retrieve",
            return_value=_stripe_session(metadata={"account_id": "not-a-number"}),
        ):
            details = await StripePaymentProvider().retrieve_checkout_session("cs_test_123")

        assert details.account_id is None
        assert details.plan_id is None

    async def test_timeout_is_transient(self):
        def slow_retrieve(session_ref):
            time.sleep(0.3)
            return _stripe_session()

        with patch.object(stripe.checkout.Session, "retrieve", side_effect=slow_retrieve):
            with pytest.raises(TransientProviderError):
                await StripePaymentProvider(timeout_seconds=0.05).retrieve_checkout_session(
                    "cs_test_123"
                )

    async def test_network_error_is_transient(self):
        with patch.object(
            stripe.checkout.Session,
            "retrieve",
            side_effect=stripe.APIConnectionError("connection reset"),
        ):
            with pytest.raises(TransientProviderError):
                await StripePaymentProvider().retrieve_checkout_session("cs_test_123")

    async def test_unknown_session_is_invalid(self):
        with patch.object(
            stripe.checkout.Session,
            "retrieve",
            side_effect=stripe.InvalidRequestError("No such checkout.session", "id"),
        ):
            with pytest.raises(InvalidEventError):
                await StripePaymentProvider().retrieve_checkout_session("cs_missing")

    async def test_health_check(self):
        with patch.object(stripe.Account, "retrieve", return_value=MagicMock()):
            assert await StripePaymentProvider().health_check() is True

        with patch.object(
            stripe.Account, "retrieve", side_effect=stripe.AuthenticationError("bad key")
        ):
            assert await StripePaymentProvider().health_check() is False
