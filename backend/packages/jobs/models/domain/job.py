from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel


class JobStatus(str, Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    ACTIVE = "active"
    FILLED = "filled"
    EXPIRED = "expired"
    CANCELLED = "cancelled"

    @classmethod
    def live_statuses(cls) -> tuple["JobStatus", ...]:
        """Statuses that count against a plan's quota."""
        return (cls.ACTIVE, cls.FILLED)


class Job(BaseModel):
    id: int
    account_id: int
    title: str
    status: JobStatus
    created_at: datetime
    expires_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobCreateModel(BaseModel):
    """Model for creating a new job."""

    account_id: int
    title: str
    status: JobStatus = JobStatus.ACTIVE
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        use_enum_values = True
        validate_default = True
