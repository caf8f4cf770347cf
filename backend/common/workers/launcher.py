"""
Process entry point for periodic workers: telemetry, signals and shutdown.
"""

import asyncio
import logging
import signal
from typing import Callable, Optional

from common.core.otel_axiom_exporter import init_telemetry, get_logger
from common.db.session import engine
from common.providers.messaging.factory import close_message_queue
from common.workers.base_worker import PeriodicWorker


class WorkerLauncher:
    """Builds a PeriodicWorker, runs it until signalled, then releases shared clients."""

    def __init__(self):
        self.logger = get_logger(__name__)
        self.worker: Optional[PeriodicWorker] = None

    def _register_signal_handlers(self):
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(
                sig, lambda s=sig: asyncio.ensure_future(self._on_signal(s))
            )

    async def _on_signal(self, signum: int) -> None:
        self.logger.info(f"Received signal {signum}, finishing current pass...")
        if self.worker:
            await self.worker.stop()

    async def _release_resources(self) -> None:
        await close_message_queue()
        await engine.dispose()

    async def _run_async(self, worker: PeriodicWorker, worker_name: str, once: bool):
        self.worker = worker
        try:
            if once:
                self.logger.info(f"Running a single {worker_name} pass")
                await worker.run_once()
            else:
                self._register_signal_handlers()
                self.logger.info(f"Starting {worker_name}...")
                await worker.start()
        except Exception as e:
            self.logger.error(f"{worker_name} failed: {e}", exc_info=True)
            raise
        finally:
            await self._release_resources()
            self.logger.info(f"{worker_name} shutdown complete")

    def run(
        self,
        worker_factory: Callable[..., PeriodicWorker],
        worker_name: str,
        factory_kwargs: Optional[dict] = None,
        once: bool = False,
    ):
        init_telemetry()
        self.logger.info(f"Configuring {worker_name}...")

        worker = worker_factory(**(factory_kwargs or {}))
        asyncio.run(self._run_async(worker, worker_name, once))

    def run_with_cli(
        self,
        worker_factory: Callable[..., PeriodicWorker],
        worker_name: str,
        cli_setup_func: Callable,
    ):
        """
        Run a worker configured from the command line.

        cli_setup_func returns (args, factory_kwargs); ``args.log_level`` and
        ``args.once`` are honoured when present.
        """
        args, factory_kwargs = cli_setup_func()
        if getattr(args, "log_level", None):
            logging.getLogger().setLevel(getattr(logging, args.log_level))

        self.run(
            worker_factory=worker_factory,
            worker_name=worker_name,
            factory_kwargs=factory_kwargs,
            once=getattr(args, "once", False),
        )
