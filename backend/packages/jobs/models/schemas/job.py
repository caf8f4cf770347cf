from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from packages.jobs.models.domain.job import JobStatus


class JobCreate(BaseModel):
    account_id: int
    title: str = Field(..., min_length=1, max_length=255)
    expires_at: Optional[datetime] = None


class JobResponse(BaseModel):
    id: int
    account_id: int
    title: str
    status: JobStatus
    created_at: datetime
    expires_at: Optional[datetime] = None
    remaining_quota: Optional[int] = Field(
        None, description="Postings left in the current period; null when unlimited"
    )
