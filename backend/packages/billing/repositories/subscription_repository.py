"""
Repository for subscription management.
"""

from typing import Optional
from datetime import datetime, timedelta
from sqlalchemy import select, update

from common.repositories.base import BaseRepository
from packages.accounts.models.domain.account import Account
from packages.billing.models.database.subscription import SubscriptionEntity
from packages.billing.models.domain.subscription import Subscription
from packages.billing.models.domain.enums import PlanId
from packages.billing.models.domain.plans import PlanDefinition, get_plan
from common.core.otel_axiom_exporter import trace_span


class SubscriptionRepository(BaseRepository[SubscriptionEntity, Subscription]):
    """Repository for managing account subscriptions."""

    def __init__(self):
        super().__init__(SubscriptionEntity, Subscription)

    @trace_span
    async def get_by_account_id(self, account_id: int) -> Optional[Subscription]:
        async with self._get_session() as session:
            result = await session.execute(
                select(SubscriptionEntity).where(
                    SubscriptionEntity.account_id == account_id
                ).execution_options(populate_existing=True)
            )
            db_subscription = result.scalar_one_or_none()
            return self._entity_to_domain(db_subscription) if db_subscription else None

    @trace_span
    async def get_for_update(self, account_id: int) -> Optional[Subscription]:
        """
        Read the subscription and hold its row lock until the transaction ends.

        Must be called inside transaction(). On PostgreSQL this is
        SELECT ... FOR UPDATE; SQLite ignores the clause.
        """
        async with self._get_session() as session:
            result = await session.execute(
                select(SubscriptionEntity)
                .where(SubscriptionEntity.account_id == account_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            db_subscription = result.scalar_one_or_none()
            return self._entity_to_domain(db_subscription) if db_subscription else None

    @trace_span
    async def create_trial(self, account: Account) -> Subscription:
        """Create the implicit trial record for a newly registered account."""
        trial = get_plan(PlanId.TRIAL)
        db_subscription = SubscriptionEntity(
            account_id=account.id,
            plan_id=trial.plan_id.value,
            period_start=account.created_at,
            period_end=None,
            quota=trial.quota,
            extended_access=trial.grants_extended_access,
        )
        async with self._get_session() as session:
            session.add(db_subscription)
            await session.flush()
            await session.refresh(db_subscription)
            return self._entity_to_domain(db_subscription)

    @trace_span
    async def activate(
        self,
        account_id: int,
        plan: PlanDefinition,
        external_customer_ref: Optional[str],
        session_ref: str,
        now: datetime,
    ) -> Subscription:
        """
        Start a new period for the account, superseding the current one.

        Every period field is written by one UPDATE so a concurrent reader
        sees either the old period or the new one, never a mix. Inserts the
        row if the account somehow has none.
        """
        values = {
            "plan_id": plan.plan_id.value,
            "period_start": now,
            "period_end": now + timedelta(days=plan.period_days),
            "quota": plan.quota,
            "extended_access": plan.grants_extended_access,
            "external_customer_ref": external_customer_ref,
            "last_session_ref": session_ref,
            "updated_at": now,
        }

        async with self._get_session() as session:
            result = await session.execute(
                update(SubscriptionEntity)
                .where(SubscriptionEntity.account_id == account_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                session.add(SubscriptionEntity(account_id=account_id, **values))
            await session.flush()

            refreshed = await session.execute(
                select(SubscriptionEntity)
                .where(SubscriptionEntity.account_id == account_id)
                .execution_options(populate_existing=True)
            )
            return self._entity_to_domain(refreshed.scalar_one())
