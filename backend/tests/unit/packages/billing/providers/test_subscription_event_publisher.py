"""
Unit tests for SubscriptionEventPublisher.
"""

import pytest

from common.providers.messaging.messages import SubscriptionActivatedMessage
from packages.billing.providers.notifications.publisher import SubscriptionEventPublisher

from tests.fixtures import T0


def _message():
    return SubscriptionActivatedMessage(
        account_id=7,
        plan_id="NETWORK",
        session_ref="sess_pub",
        amount_cents=1_750_000,
        currency="usd",
        period_start=T0,
        period_end=None,
    )


@pytest.mark.asyncio
class TestSubscriptionEventPublisher:
    async def test_publishes_json_message(self, mock_message_queue):
        published = await SubscriptionEventPublisher(mock_message_queue).publish_activation(
            _message()
        )

        assert published is True
        queue, body = mock_message_queue.publish.await_args.args
        assert queue == "billing_subscription_events"
        assert body["account_id"] == 7
        assert body["period_start"] == T0.isoformat().replace("+00:00", "Z")
        assert mock_message_queue.publish.await_args.kwargs["message_id"] == "activation:sess_pub"

    async def test_broker_failure_is_swallowed(self, mock_message_queue):
        mock_message_queue.publish.side_effect = ConnectionError("broker down")

        published = await SubscriptionEventPublisher(mock_message_queue).publish_activation(
            _message()
        )

        assert published is False

    async def test_unpublished_message_reported(self, mock_message_queue):
        mock_message_queue.publish.return_value = False

        assert (
            await SubscriptionEventPublisher(mock_message_queue).publish_activation(_message())
            is False
        )
