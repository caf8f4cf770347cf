from typing import Optional

from common.core.otel_axiom_exporter import trace_span, get_logger
from common.providers.messaging.constants import QueueName
from common.providers.messaging.factory import get_message_queue
from common.providers.messaging.interface import MessageQueueInterface
from common.providers.messaging.messages import SubscriptionActivatedMessage

logger = get_logger(__name__)


class SubscriptionEventPublisher:
    """
    Publishes subscription events to the message queue.

    Fire-and-forget: billing state is already committed when this runs, so a
    failed publish is logged and never reported to the caller.
    """

    def __init__(self, message_queue: Optional[MessageQueueInterface] = None):
        self.message_queue = message_queue or get_message_queue()

    @trace_span
    async def publish_activation(self, message: SubscriptionActivatedMessage) -> bool:
        try:
            published = await self.message_queue.publish(
                QueueName.SUBSCRIPTION_EVENTS,
                message.model_dump(mode="json"),
                message_id=f"activation:{message.session_ref}",
            )
        except Exception as e:
            logger.error(
                f"Failed to publish subscription activation: {e}",
                extra={"account_id": message.account_id, "session_ref": message.session_ref},
            )
            return False

        if not published:
            logger.warning(
                f"Subscription activation for account {message.account_id} was not published",
                extra={"account_id": message.account_id, "session_ref": message.session_ref},
            )
        return published
