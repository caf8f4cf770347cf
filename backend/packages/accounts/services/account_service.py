from typing import Optional

from common.core.exceptions import ValidationError
from common.core.otel_axiom_exporter import trace_span, get_logger
from common.db.scoped import transaction
from packages.accounts.models.domain.account import Account, AccountCreateModel
from packages.accounts.repositories.account_repository import AccountRepository
from packages.billing.repositories.subscription_repository import (
    SubscriptionRepository,
)

logger = get_logger(__name__)


class AccountService:
    """Service for account registration and lookup."""

    def __init__(self):
        self.account_repo = AccountRepository()
        self.subscription_repo = SubscriptionRepository()

    @trace_span
    async def register_account(self, account_data: AccountCreateModel) -> Account:
        """
        Create an account together with its trial subscription.

        Both rows are written in one transaction so an account never exists
        without a subscription record.
        """
        existing = await self.account_repo.get_by_email(account_data.email)
        if existing:
            raise ValidationError(
                f"Account with email '{account_data.email}' already exists"
            )

        async with transaction():
            account = await self.account_repo.create(account_data)
            await self.subscription_repo.create_trial(account)

        logger.info(
            f"Registered account {account.id} with trial until {account.trial_ends_at.isoformat()}",
            extra={"account_id": account.id, "account_type": account.account_type.value},
        )
        return account

    @trace_span
    async def get_account(self, account_id: int) -> Optional[Account]:
        return await self.account_repo.get(account_id)
