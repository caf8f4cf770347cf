from abc import ABC, abstractmethod
from typing import Dict, Any, Optional


class MessageQueueInterface(ABC):
    @abstractmethod
    async def connect(self) -> bool:
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        pass

    @abstractmethod
    async def publish(
        self, queue: str, message: Dict[str, Any], message_id: Optional[str] = None
    ) -> bool:
        """Publish one JSON message. Returns False instead of raising on broker failure.

        ``message_id`` lets consumers drop redelivered duplicates.
        """
        pass
