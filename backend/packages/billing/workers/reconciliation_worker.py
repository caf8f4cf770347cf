from typing import Optional

from common.core.config import settings
from common.core.otel_axiom_exporter import get_logger
from common.workers.base_worker import PeriodicWorker
from packages.billing.services.reconciliation_service import ReconciliationService

logger = get_logger(__name__)


class BillingReconciliationWorker(PeriodicWorker):
    """Periodically completes ledger entries left PENDING or FAILED."""

    def __init__(
        self,
        interval_seconds: Optional[float] = None,
        reconciliation_service: Optional[ReconciliationService] = None,
    ):
        super().__init__(
            name="billing_reconciliation",
            interval_seconds=interval_seconds or settings.reconciliation_interval_seconds,
        )
        self.reconciliation_service = reconciliation_service or ReconciliationService()

    async def tick(self):
        report = await self.reconciliation_service.reconcile()
        if report.rejected:
            logger.error(
                f"{report.rejected} ledger entries need operator review: {report.rejected_session_refs}"
            )
