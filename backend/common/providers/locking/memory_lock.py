import time
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

from .interface import DistributedLockInterface
from common.core.otel_axiom_exporter import get_logger

logger = get_logger(__name__)


@dataclass
class LockEntry:
    """A held lock with its owner token and expiry."""

    token: str
    expires_at: float

    def is_expired(self) -> bool:
        return time.time() > self.expires_at


class MemoryLock(DistributedLockInterface):
    """
    In-process lock implementation.

    Only serializes coroutines on a single event loop, so it is suitable for
    local development and tests, never for multiple API replicas.
    """

    def __init__(self):
        self._locks: Dict[str, LockEntry] = {}
        logger.info("Memory lock provider initialized")

    async def acquire_lock(
        self, resource_key: str, timeout_seconds: int = 30
    ) -> Optional[str]:
        entry = self._locks.get(resource_key)
        if entry is not None and not entry.is_expired():
            logger.debug(f"Failed to acquire lock for {resource_key} - already locked")
            return None

        lock_token = str(uuid.uuid4())
        self._locks[resource_key] = LockEntry(
            token=lock_token, expires_at=time.time() + timeout_seconds
        )
        logger.debug(f"Acquired lock for {resource_key} with token {lock_token}")
        return lock_token

    async def release_lock(self, resource_key: str, lock_token: str) -> bool:
        entry = self._locks.get(resource_key)
        if entry is None or entry.token != lock_token:
            logger.warning(
                f"Cannot release lock for {resource_key} - token mismatch or lock expired"
            )
            return False
        del self._locks[resource_key]
        logger.debug(f"Released lock for {resource_key}")
        return True

    async def is_locked(self, resource_key: str) -> bool:
        entry = self._locks.get(resource_key)
        if entry is None:
            return False
        if entry.is_expired():
            del self._locks[resource_key]
            return False
        return True
