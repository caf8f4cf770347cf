from .interface import MessageQueueInterface
from .rabbitmq_async import RabbitMQClient
from .factory import get_message_queue, close_message_queue

__all__ = ["MessageQueueInterface", "RabbitMQClient", "get_message_queue", "close_message_queue"]
