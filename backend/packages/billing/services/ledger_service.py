"""
Service for the billing ledger: receipts and purchase history.
"""

from typing import Optional

from common.core.otel_axiom_exporter import trace_span
from packages.billing.models.domain.enums import LedgerStatus
from packages.billing.models.domain.ledger import LedgerEntry, LedgerEntryCreateModel
from packages.billing.repositories.ledger_repository import LedgerRepository


class LedgerService:
    def __init__(self):
        self.ledger_repo = LedgerRepository()

    @trace_span
    async def append(self, entry: LedgerEntryCreateModel) -> LedgerEntry:
        return await self.ledger_repo.append(entry)

    @trace_span
    async def update_status(self, session_ref: str, status: LedgerStatus) -> LedgerEntry:
        return await self.ledger_repo.update_status(session_ref, status)

    @trace_span
    async def get_by_session_ref(self, session_ref: str) -> Optional[LedgerEntry]:
        return await self.ledger_repo.get_by_session_ref(session_ref)

    @trace_span
    async def list_billing_history(
        self, account_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> list[LedgerEntry]:
        """Purchase history for receipts, newest first. Unbounded unless a limit is given."""
        return await self.ledger_repo.list_for_account(
            account_id, limit=limit, offset=offset
        )
