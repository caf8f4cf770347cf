from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel

from common.core.config import settings


class AccountType(str, Enum):
    EMPLOYER = "employer"
    AGENCY = "agency"


class Account(BaseModel):
    id: int
    name: str
    email: str
    account_type: AccountType
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def trial_ends_at(self) -> datetime:
        """End of the implicit trial, always computed from created_at."""
        return self.created_at + timedelta(days=settings.trial_period_days)

    def is_in_trial(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now <= self.trial_ends_at


class AccountCreateModel(BaseModel):
    """Model for creating a new account."""

    name: str
    email: str
    account_type: AccountType = AccountType.EMPLOYER
    # Only set explicitly by imports and tests; otherwise the database default applies
    created_at: Optional[datetime] = None

    class Config:
        use_enum_values = True
        validate_default = True
