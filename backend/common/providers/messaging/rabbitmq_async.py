from typing import Dict, Any, Optional
import asyncio
import json
import aio_pika
from aio_pika import connect_robust, Message
from aio_pika.exceptions import AMQPException
from urllib.parse import quote

from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from common.core.config import settings
from .interface import MessageQueueInterface
from common.core.otel_axiom_exporter import get_logger

logger = get_logger(__name__)

propagator = TraceContextTextMapPropagator()


class RabbitMQClient(MessageQueueInterface):
    """Publishes persistent JSON messages on the default exchange with publisher confirms."""

    def __init__(self):
        self.connection = None
        self.channel = None
        self.publish_timeout = settings.rabbitmq_publish_timeout_seconds
        self._declared_queues: set = set()

    @property
    def url(self) -> str:
        return (
            f"amqp://{quote(settings.rabbitmq_username)}:{quote(settings.rabbitmq_password)}"
            f"@{settings.rabbitmq_host}:{settings.rabbitmq_port}/{quote(settings.rabbitmq_vhost, safe='')}"
        )

    async def connect(self) -> bool:
        try:
            self.connection = await connect_robust(self.url)
            self.channel = await self.connection.channel(publisher_confirms=True)
            self._declared_queues.clear()
            logger.info("Connected to RabbitMQ")
            return True
        except (AMQPException, OSError) as e:
            logger.error(f"Failed to connect to RabbitMQ: {e}")
            return False

    async def disconnect(self) -> None:
        try:
            if self.channel and not self.channel.is_closed:
                await self.channel.close()
            if self.connection and not self.connection.is_closed:
                await self.connection.close()
            logger.info("Disconnected from RabbitMQ")
        except (AMQPException, OSError) as e:
            logger.error(f"Error disconnecting from RabbitMQ: {e}")

    async def _ensure_queue(self, queue: str) -> bool:
        if not self.channel or self.channel.is_closed:
            if not await self.connect():
                return False
        if queue not in self._declared_queues:
            await self.channel.declare_queue(queue, durable=True)
            self._declared_queues.add(queue)
        return True

    async def publish(
        self, queue: str, message: Dict[str, Any], message_id: Optional[str] = None
    ) -> bool:
        try:
            if not await self._ensure_queue(queue):
                return False

            headers = {}
            propagator.inject(headers)

            msg = Message(
                body=json.dumps(message, default=str).encode(),
                delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
                content_type="application/json",
                message_id=message_id,
                headers=headers,
            )
            # Confirmed by the broker or it counts as a failure
            await asyncio.wait_for(
                self.channel.default_exchange.publish(
                    msg, routing_key=queue, mandatory=True
                ),
                timeout=self.publish_timeout,
            )
            logger.info(f"Published message {message_id} to queue {queue}")
            return True
        except (AMQPException, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to publish message {message_id} to {queue}: {e}")
            return False
