from typing import Optional
from sqlalchemy import select

from common.repositories.base import BaseRepository
from packages.accounts.models.database.account import AccountEntity
from packages.accounts.models.domain.account import Account
from common.core.otel_axiom_exporter import trace_span


class AccountRepository(BaseRepository[AccountEntity, Account]):
    def __init__(self):
        super().__init__(AccountEntity, Account)

    @trace_span
    async def get_by_email(self, email: str) -> Optional[Account]:
        async with self._get_session() as session:
            result = await session.execute(
                select(AccountEntity).where(AccountEntity.email == email)
            )
            db_account = result.scalar_one_or_none()
            return self._entity_to_domain(db_account) if db_account else None
