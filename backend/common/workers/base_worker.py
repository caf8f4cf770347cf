import asyncio
from abc import ABC, abstractmethod
from typing import Optional
from uuid import uuid4

from common.core.otel_axiom_exporter import get_logger

logger = get_logger(__name__)


class PeriodicWorker(ABC):
    """Base worker that runs one unit of work on a fixed interval until stopped."""

    def __init__(
        self,
        name: str,
        interval_seconds: float,
        worker_id: Optional[str] = None,
    ):
        self.name = name
        self.interval_seconds = interval_seconds
        self.worker_id = worker_id or f"{name}_worker_{uuid4()}"
        self.running = False
        self._stop_event = asyncio.Event()

    async def setup(self):
        """Initialize worker dependencies."""
        logger.info(f"Worker {self.worker_id} setup completed")

    async def cleanup(self):
        """Cleanup worker resources."""
        logger.info(f"Worker {self.worker_id} cleanup completed")

    async def start(self):
        """Run ticks until stop() is called."""
        if self.running:
            logger.warning(f"Worker {self.worker_id} is already running")
            return

        self.running = True
        self._stop_event.clear()
        logger.info(
            f"Starting worker {self.worker_id} with interval {self.interval_seconds}s"
        )

        try:
            await self.setup()
            while self.running:
                await self._run_tick()
                try:
                    await asyncio.wait_for(
                        self._stop_event.wait(), timeout=self.interval_seconds
                    )
                except asyncio.TimeoutError:
                    pass
        finally:
            self.running = False
            await self.cleanup()

    async def run_once(self):
        """Run a single tick between setup and cleanup; errors propagate."""
        await self.setup()
        try:
            await self.tick()
        finally:
            await self.cleanup()

    async def stop(self):
        """Stop the worker after the current tick."""
        self.running = False
        self._stop_event.set()
        logger.info(f"Stopping worker {self.worker_id}")

    async def _run_tick(self):
        # A failed tick is logged and retried on the next interval
        try:
            await self.tick()
        except Exception as e:
            logger.error(
                f"Error in worker {self.worker_id} tick: {e}",
                exc_info=True,
            )

    @abstractmethod
    async def tick(self):
        """One unit of work. Must be implemented by subclasses."""
        pass
