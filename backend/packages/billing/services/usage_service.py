"""
Service for metered usage.

Usage is never stored; it is counted from the job store on every call.
"""

from datetime import datetime, timezone
from typing import Optional

from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.jobs.repositories.job_repository import JobRepository

logger = get_logger(__name__)


class UsageService:
    """Counts the postings that consume an account's quota."""

    def __init__(self):
        self.job_repo = JobRepository()

    @trace_span
    async def count_usage(
        self,
        account_id: int,
        period_start: Optional[datetime],
        now: Optional[datetime] = None,
    ) -> int:
        """
        Count postings against the current period.

        A missing period_start is a data-integrity problem; it is logged and
        counted as zero usage rather than raised.
        """
        if period_start is None:
            logger.warning(
                f"Account {account_id} has no period_start; counting usage as 0",
                extra={"account_id": account_id, "anomaly": "missing_period_start"},
            )
            return 0

        now = now or datetime.now(timezone.utc)
        return await self.job_repo.count_usage(account_id, period_start, now)
