"""
Unit tests for the billing reconciliation worker.
"""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from packages.billing.models.domain.reconciliation import ReconciliationReport
from packages.billing.workers.reconciliation_worker import BillingReconciliationWorker


def _report(**counts):
    return ReconciliationReport(started_at=datetime.now(timezone.utc), **counts)


@pytest.mark.asyncio
class TestBillingReconciliationWorker:
    async def test_tick_runs_reconciliation(self):
        service = AsyncMock()
        service.reconcile = AsyncMock(return_value=_report(examined=2, completed=2))
        worker = BillingReconciliationWorker(interval_seconds=60, reconciliation_service=service)

        await worker.tick()

        service.reconcile.assert_awaited_once()

    async def test_tick_reports_rejected_entries(self, caplog):
        service = AsyncMock()
        service.reconcile = AsyncMock(
            return_value=_report(examined=1, rejected=1, rejected_session_refs=["cs_bad"])
        )
        worker = BillingReconciliationWorker(interval_seconds=60, reconciliation_service=service)

        await worker.tick()

        assert "cs_bad" in caplog.text

    async def test_failed_tick_does_not_stop_worker(self):
        service = AsyncMock()
        service.reconcile = AsyncMock(side_effect=[RuntimeError("db down"), _report()])
        worker = BillingReconciliationWorker(interval_seconds=0.01, reconciliation_service=service)

        task = asyncio.create_task(worker.start())
        for _ in range(100):
            if service.reconcile.await_count >= 2:
                break
            await asyncio.sleep(0.01)
        await worker.stop()
        await asyncio.wait_for(task, timeout=1)

        assert service.reconcile.await_count >= 2
        assert worker.running is False

    async def test_uses_configured_interval(self):
        worker = BillingReconciliationWorker(reconciliation_service=AsyncMock())
        assert worker.interval_seconds == 300
        assert worker.name == "billing_reconciliation"
