from datetime import datetime
from pydantic import BaseModel, Field

from packages.accounts.models.domain.account import AccountType


class AccountCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=320)
    account_type: AccountType = AccountType.EMPLOYER


class AccountResponse(BaseModel):
    id: int
    name: str
    email: str
    account_type: AccountType
    created_at: datetime
    trial_ends_at: datetime

    class Config:
        from_attributes = True
