from typing import Optional

from common.core.config import settings
from common.core.constants import LockProviderType
from common.core.otel_axiom_exporter import get_logger

from .interface import DistributedLockInterface
from .memory_lock import MemoryLock
from .redis_lock import RedisLock

logger = get_logger(__name__)

# Global instance
_lock_provider: Optional[DistributedLockInterface] = None


def get_lock_provider() -> DistributedLockInterface:
    """
    Get the configured lock provider.

    Redis serializes across API replicas and workers; memory only within one
    process.
    """
    global _lock_provider

    if _lock_provider is None:
        if settings.lock_provider == LockProviderType.MEMORY:
            _lock_provider = MemoryLock()
        else:
            _lock_provider = RedisLock()
        logger.info(f"Initialized {settings.lock_provider.value} lock provider")

    return _lock_provider


def reset_lock_provider() -> None:
    """Drop the cached provider so the next call rebuilds it from settings."""
    global _lock_provider
    _lock_provider = None
