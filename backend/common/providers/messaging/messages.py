from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SubscriptionActivatedMessage(BaseModel):
    """Published after a paid checkout has replaced an account's plan.

    Consumers (receipts, CRM sync) must tolerate duplicates; the message is
    sent after commit and is not part of the billing transaction.
    """

    account_id: int
    plan_id: str
    session_ref: str
    amount_cents: int
    currency: str
    period_start: datetime
    period_end: Optional[datetime] = None
