from datetime import datetime
from typing import Optional
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from packages.accounts.models.domain.account import Account, AccountCreateModel
from packages.accounts.services.account_service import AccountService
from packages.billing.providers.notifications.publisher import SubscriptionEventPublisher
from packages.billing.services.payment_event_service import PaymentEventService
from tests.fixtures import T0, FakePaymentProvider


@pytest.fixture
def mock_message_queue():
    """Create a mock message queue instance for testing."""
    queue = AsyncMock()
    queue.publish = AsyncMock(return_value=True)
    queue.connect = AsyncMock(return_value=True)
    queue.disconnect = AsyncMock(return_value=None)
    return queue


@pytest.fixture
def payment_provider():
    return FakePaymentProvider()


@pytest.fixture
def payment_event_service(payment_provider, mock_message_queue):
    """Payment event service wired to the fake provider and a mock queue."""
    return PaymentEventService(
        payment_provider=payment_provider,
        publisher=SubscriptionEventPublisher(message_queue=mock_message_queue),
    )


@pytest.fixture
def create_account():
    """Register accounts (with their trial) through the real service."""
    counter = {"n": 0}

    async def _create(
        created_at: Optional[datetime] = T0, email: Optional[str] = None
    ) -> Account:
        counter["n"] += 1
        return await AccountService().register_account(
            AccountCreateModel(
                name=f"Employer {counter['n']}",
                email=email or f"hiring{counter['n']}@example.com",
                created_at=created_at,
            )
        )

    return _create


@pytest_asyncio.fixture
async def sample_account(create_account):
    """An account registered at T0, still in its trial."""
    return await create_account()
