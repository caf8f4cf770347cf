# Test data and fakes shared across test modules

from datetime import datetime, timezone
from typing import Dict, Optional

from packages.billing.exceptions import InvalidEventError
from packages.billing.models.domain.payment import CheckoutSessionDetails
from packages.billing.providers.payment.interface import PaymentProviderInterface

# Fixed reference instant for time-dependent tests
T0 = datetime(2026, 1, 5, 12, 0, tzinfo=timezone.utc)

SAMPLE_ACCOUNT_DATA = {
    "name": "Acme Hiring",
    "email": "talent@acme.example.com",
    "account_type": "employer",
}


class FakePaymentProvider(PaymentProviderInterface):
    """In-memory payment provider; sessions are registered by the test."""

    def __init__(self):
        self.sessions: Dict[str, CheckoutSessionDetails] = {}
        self.error: Optional[Exception] = None
        self.calls: list[str] = []

    def add_session(
        self,
        session_ref: str,
        account_id: Optional[int],
        plan_id: Optional[str],
        payment_status: str = "paid",
        amount_total: Optional[int] = None,
        currency: Optional[str] = "usd",
        customer_ref: Optional[str] = "cus_test123",
    ) -> CheckoutSessionDetails:
        details = CheckoutSessionDetails(
            session_ref=session_ref,
            payment_status=payment_status,
            account_id=account_id,
            plan_id=plan_id,
            customer_ref=customer_ref,
            amount_total=amount_total,
            currency=currency,
        )
        self.sessions[session_ref] = details
        return details

    async def retrieve_checkout_session(self, session_ref: str) -> CheckoutSessionDetails:
        self.calls.append(session_ref)
        if self.error is not None:
            raise self.error
        if session_ref not in self.sessions:
            raise InvalidEventError(f"Unknown checkout session {session_ref}")
        return self.sessions[session_ref]

    async def health_check(self) -> bool:
        return True
