from datetime import datetime
from pydantic import BaseModel, Field


class ReconciliationReport(BaseModel):
    """Counts from one reconciliation pass over stale ledger entries."""

    started_at: datetime
    examined: int = 0
    completed: int = 0
    already_processed: int = 0
    still_failing: int = 0
    rejected: int = 0
    rejected_session_refs: list[str] = Field(default_factory=list)
