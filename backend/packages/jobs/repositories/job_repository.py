from datetime import datetime, timedelta

from sqlalchemy import select, func, or_

from common.core.config import settings
from common.core.otel_axiom_exporter import trace_span
from common.repositories.base import BaseRepository
from packages.jobs.models.database.job import JobEntity
from packages.jobs.models.domain.job import Job, JobStatus


class JobRepository(BaseRepository[JobEntity, Job]):
    def __init__(self):
        super().__init__(JobEntity, Job)

    @trace_span
    async def count_usage(
        self, account_id: int, period_start: datetime, now: datetime
    ) -> int:
        """
        Count the account's postings that still consume quota.

        A posting counts when it was created in the current period, is live,
        and has no expiry, an expiry in the future, or an expiry within the
        grace window.
        """
        grace_cutoff = now - timedelta(days=settings.usage_grace_days)
        live = [s.value for s in JobStatus.live_statuses()]

        query = select(func.count(JobEntity.id)).where(
            JobEntity.account_id == account_id,
            JobEntity.created_at >= period_start,
            JobEntity.status.in_(live),
            or_(
                JobEntity.expires_at.is_(None),
                JobEntity.expires_at > now,
                JobEntity.expires_at >= grace_cutoff,
            ),
        )

        async with self._get_session() as session:
            result = await session.execute(query)
            return result.scalar_one()
