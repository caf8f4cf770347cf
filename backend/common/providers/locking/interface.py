import asyncio
import time
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from common.core.exceptions import LockUnavailableError


class DistributedLockInterface(ABC):
    """Interface for distributed lock providers."""

    @abstractmethod
    async def acquire_lock(
        self, resource_key: str, timeout_seconds: int = 30
    ) -> Optional[str]:
        """
        Acquire a lock for a resource without waiting.

        Args:
            resource_key: The resource to lock (e.g., "billing:account:42")
            timeout_seconds: Lock expiration time in seconds

        Returns:
            Lock token if acquired, None otherwise
        """
        pass

    @abstractmethod
    async def release_lock(self, resource_key: str, lock_token: str) -> bool:
        """
        Release a lock.

        Returns:
            True if released, False if token doesn't match or lock doesn't exist
        """
        pass

    @abstractmethod
    async def is_locked(self, resource_key: str) -> bool:
        pass

    async def acquire_lock_with_retry(
        self,
        resource_key: str,
        lock_ttl_seconds: int = 30,
        acquire_timeout_seconds: float = 5.0,
        retry_interval_ms: int = 50,
    ) -> Optional[str]:
        """
        Acquire a lock, retrying until acquire_timeout_seconds elapses.

        Returns:
            Lock token if acquired, None if timeout exceeded
        """
        end_time = time.time() + acquire_timeout_seconds
        while time.time() < end_time:
            token = await self.acquire_lock(resource_key, lock_ttl_seconds)
            if token:
                return token
            await asyncio.sleep(retry_interval_ms / 1000)
        return None

    @asynccontextmanager
    async def hold(
        self,
        resource_key: str,
        lock_ttl_seconds: int = 30,
        acquire_timeout_seconds: float = 5.0,
    ) -> AsyncGenerator[str, None]:
        """
        Hold a lock for the duration of the block.

        Raises:
            LockUnavailableError: If the lock is not acquired within the timeout
        """
        token = await self.acquire_lock_with_retry(
            resource_key,
            lock_ttl_seconds=lock_ttl_seconds,
            acquire_timeout_seconds=acquire_timeout_seconds,
        )
        if token is None:
            raise LockUnavailableError(f"Could not acquire lock for {resource_key}")
        try:
            yield token
        finally:
            await self.release_lock(resource_key, token)
