"""
Reconciliation of ledger entries that never reached COMPLETED.

An entry stays PENDING when the process died mid-activation, or FAILED when
activation failed and no redelivery came. Each pass re-drives them through
the normal payment path, which re-verifies with the provider and is
idempotent.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from common.core.config import settings
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.billing.exceptions import BillingError, InvalidEventError
from packages.billing.models.domain.enums import PaymentOutcomeStatus
from packages.billing.models.domain.reconciliation import ReconciliationReport
from packages.billing.repositories.ledger_repository import LedgerRepository
from packages.billing.services.payment_event_service import PaymentEventService
from common.core.exceptions import LockUnavailableError

logger = get_logger(__name__)


class ReconciliationService:
    def __init__(self, payment_event_service: Optional[PaymentEventService] = None):
        self.ledger_repo = LedgerRepository()
        self.payment_event_service = payment_event_service or PaymentEventService()

    @trace_span
    async def reconcile(
        self,
        older_than_minutes: Optional[int] = None,
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> ReconciliationReport:
        """
        Re-drive PENDING/FAILED entries not touched for older_than_minutes.

        The age cutoff keeps this away from entries an in-flight delivery is
        still working on. Rejected sessions (unpaid, unknown plan or account)
        are marked rejected so later passes skip them, and are reported for an
        operator.
        """
        now = now or datetime.now(timezone.utc)
        older_than_minutes = (
            older_than_minutes
            if older_than_minutes is not None
            else settings.reconciliation_min_age_minutes
        )
        limit = limit or settings.reconciliation_batch_size
        cutoff = now - timedelta(minutes=older_than_minutes)

        report = ReconciliationReport(started_at=now)
        entries = await self.ledger_repo.list_unreconciled(cutoff, limit=limit)

        for entry in entries:
            report.examined += 1
            extra = {"session_ref": entry.session_ref, "account_id": entry.account_id}
            try:
                outcome = await self.payment_event_service.handle_confirmed_payment(
                    entry.session_ref
                )
            except InvalidEventError as e:
                report.rejected += 1
                report.rejected_session_refs.append(entry.session_ref)
                await self.ledger_repo.mark_rejected(entry.session_ref, str(e), now)
                logger.error(
                    f"Reconciliation rejected ledger entry {entry.session_ref}: {e}",
                    extra=extra,
                )
                continue
            except (BillingError, LockUnavailableError) as e:
                report.still_failing += 1
                logger.warning(
                    f"Reconciliation could not complete ledger entry {entry.session_ref}: {e}",
                    extra=extra,
                )
                continue

            if outcome.status == PaymentOutcomeStatus.ACTIVATED:
                report.completed += 1
            else:
                report.already_processed += 1

        logger.info(
            f"Reconciliation examined {report.examined} entries: "
            f"{report.completed} completed, {report.still_failing} still failing, "
            f"{report.rejected} rejected",
            extra=report.model_dump(mode="json"),
        )
        return report
