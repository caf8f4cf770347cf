"""
Service for confirmed-payment events.

Deliveries are at-least-once: Stripe webhooks and the success-page fallback
can both report the same checkout session, and either may be retried. The
ledger's unique session_ref is what turns those duplicates into no-ops.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from common.core.config import settings
from common.core.otel_axiom_exporter import trace_span, get_logger
from common.db.scoped import savepoint, transaction
from common.providers.locking.factory import get_lock_provider
from common.providers.locking.interface import DistributedLockInterface
from common.providers.messaging.messages import SubscriptionActivatedMessage
from packages.accounts.models.domain.account import Account
from packages.accounts.repositories.account_repository import AccountRepository
from packages.billing.exceptions import (
    InvalidEventError,
    InvalidStatusTransitionError,
    PersistenceFailureError,
    PlanNotFoundError,
    StateConflictError,
)
from packages.billing.models.domain.enums import LedgerStatus, PaymentOutcomeStatus
from packages.billing.models.domain.ledger import LedgerEntry, LedgerEntryCreateModel
from packages.billing.models.domain.payment import CheckoutSessionDetails, PaymentOutcome
from packages.billing.models.domain.plans import PlanDefinition, get_plan
from packages.billing.models.domain.subscription import Subscription
from packages.billing.providers.notifications.publisher import SubscriptionEventPublisher
from packages.billing.providers.payment.factory import get_payment_provider
from packages.billing.providers.payment.interface import PaymentProviderInterface
from packages.billing.repositories.ledger_repository import LedgerRepository
from packages.billing.services.subscription_service import SubscriptionService

logger = get_logger(__name__)

# Statuses that mean the session has already been applied
_PROCESSED_STATUSES = (LedgerStatus.COMPLETED, LedgerStatus.REFUNDED)


def payment_lock_key(session_ref: str) -> str:
    return f"billing:payment:{session_ref}"


class PaymentEventService:
    """Applies confirmed checkout sessions to subscriptions and the ledger."""

    def __init__(
        self,
        payment_provider: Optional[PaymentProviderInterface] = None,
        publisher: Optional[SubscriptionEventPublisher] = None,
        lock_provider: Optional[DistributedLockInterface] = None,
    ):
        self.payment_provider = payment_provider or get_payment_provider()
        self.publisher = publisher or SubscriptionEventPublisher()
        self.lock_provider = lock_provider or get_lock_provider()
        self.ledger_repo = LedgerRepository()
        self.account_repo = AccountRepository()
        self.subscription_service = SubscriptionService()

    def _already_processed(self, entry: LedgerEntry) -> PaymentOutcome:
        return PaymentOutcome(
            status=PaymentOutcomeStatus.ALREADY_PROCESSED,
            session_ref=entry.session_ref,
            account_id=entry.account_id,
            plan_id=entry.plan_id,
        )

    @trace_span
    async def handle_confirmed_payment(
        self, session_ref: str, now: Optional[datetime] = None
    ) -> PaymentOutcome:
        """
        Apply one confirmed checkout session.

        Returns ACTIVATED the first time a session is applied and
        ALREADY_PROCESSED for every later delivery of it.

        Raises:
            InvalidEventError: Session is unpaid, unknown or missing metadata (terminal)
            TransientProviderError: Provider timed out or was unreachable (retryable)
            PersistenceFailureError: Local write failed; entry left for reconciliation (retryable)
            LockUnavailableError: Another delivery of this session held the lock too long (retryable)
        """
        if not session_ref:
            raise InvalidEventError("session_ref is required")

        # Lock TTL must outlive the provider timeout
        async with self.lock_provider.hold(
            payment_lock_key(session_ref),
            lock_ttl_seconds=max(
                settings.lock_ttl_seconds,
                int(settings.payment_provider_timeout_seconds) * 3,
            ),
            acquire_timeout_seconds=settings.payment_provider_timeout_seconds,
        ):
            existing = await self.ledger_repo.get_by_session_ref(session_ref)
            if existing is not None and existing.status in _PROCESSED_STATUSES:
                logger.info(
                    f"Checkout session {session_ref} already processed",
                    extra={"session_ref": session_ref, "account_id": existing.account_id},
                )
                return self._already_processed(existing)

            details = await self.payment_provider.retrieve_checkout_session(session_ref)
            plan, account = await self._verify(session_ref, details)

            try:
                subscription = await self._apply(details, plan, account, now)
            except StateConflictError:
                logger.info(
                    f"Checkout session {session_ref} completed by a concurrent delivery",
                    extra={"session_ref": session_ref, "account_id": account.id},
                )
                return PaymentOutcome(
                    status=PaymentOutcomeStatus.ALREADY_PROCESSED,
                    session_ref=session_ref,
                    account_id=account.id,
                    plan_id=plan.plan_id,
                )

        await self.publisher.publish_activation(
            SubscriptionActivatedMessage(
                account_id=account.id,
                plan_id=plan.plan_id.value,
                session_ref=session_ref,
                amount_cents=self._amount_cents(details, plan),
                currency=self._currency(details, plan),
                period_start=subscription.period_start,
                period_end=subscription.period_end,
            )
        )

        return PaymentOutcome(
            status=PaymentOutcomeStatus.ACTIVATED,
            session_ref=session_ref,
            account_id=account.id,
            plan_id=plan.plan_id,
            period_end=subscription.period_end,
        )

    async def _verify(
        self, session_ref: str, details: CheckoutSessionDetails
    ) -> tuple[PlanDefinition, Account]:
        """Check the provider's session before anything is written."""
        extra = {"session_ref": session_ref, "payment_status": details.payment_status}

        if not details.is_paid:
            logger.error(f"Checkout session {session_ref} is not paid", extra=extra)
            raise InvalidEventError(
                f"Checkout session {session_ref} has payment_status={details.payment_status}"
            )

        if details.account_id is None or not details.plan_id:
            logger.error(
                f"Checkout session {session_ref} is missing account_id or plan_id metadata",
                extra=extra,
            )
            raise InvalidEventError(
                f"Checkout session {session_ref} is missing account_id or plan_id"
            )

        try:
            plan = get_plan(details.plan_id)
        except PlanNotFoundError:
            logger.error(
                f"Checkout session {session_ref} references unknown plan {details.plan_id}",
                extra=extra,
            )
            raise InvalidEventError(f"Unknown plan {details.plan_id}")

        if plan.is_free_trial:
            raise InvalidEventError(f"Plan {plan.plan_id.value} cannot be purchased")

        account = await self.account_repo.get(details.account_id)
        if account is None:
            logger.error(
                f"Checkout session {session_ref} references unknown account {details.account_id}",
                extra=extra,
            )
            raise InvalidEventError(f"Unknown account {details.account_id}")

        return plan, account

    @staticmethod
    def _amount_cents(details: CheckoutSessionDetails, plan: PlanDefinition) -> int:
        return details.amount_total if details.amount_total is not None else plan.price_cents

    @staticmethod
    def _currency(details: CheckoutSessionDetails, plan: PlanDefinition) -> str:
        return (details.currency or plan.currency).lower()

    async def _claim_ledger_entry(
        self, details: CheckoutSessionDetails, plan: PlanDefinition, account: Account
    ) -> LedgerEntry:
        """
        Insert the PENDING entry, or take over an unfinished one.

        Raises:
            StateConflictError: If the existing entry is already completed
        """
        try:
            return await self.ledger_repo.append(
                LedgerEntryCreateModel(
                    account_id=account.id,
                    session_ref=details.session_ref,
                    plan_id=plan.plan_id,
                    amount_cents=self._amount_cents(details, plan),
                    currency=self._currency(details, plan),
                    description=f"{plan.display_name} - {plan.description}",
                )
            )
        except StateConflictError:
            existing = await self.ledger_repo.get_by_session_ref(
                details.session_ref, for_update=True
            )
            if existing is None or existing.status in _PROCESSED_STATUSES:
                raise
            logger.info(
                f"Retrying activation for ledger entry {details.session_ref} in status {existing.status.value}",
                extra={"session_ref": details.session_ref, "account_id": account.id},
            )
            return existing

    async def _apply(
        self,
        details: CheckoutSessionDetails,
        plan: PlanDefinition,
        account: Account,
        now: Optional[datetime],
    ) -> Subscription:
        """
        Claim the ledger entry, activate and complete it in one transaction.

        Activation and COMPLETED share a savepoint. If it fails, the entry is
        marked FAILED in the outer transaction, which still commits, and
        PersistenceFailureError is raised after commit.
        """
        now = now or datetime.now(timezone.utc)
        session_ref = details.session_ref
        failure: Optional[Exception] = None
        subscription: Optional[Subscription] = None

        try:
            async with transaction():
                entry = await self._claim_ledger_entry(details, plan, account)

                try:
                    async with savepoint():
                        subscription = await self.subscription_service.activate(
                            account_id=account.id,
                            plan_id=plan.plan_id,
                            external_customer_ref=details.customer_ref,
                            session_ref=session_ref,
                            now=now,
                        )
                        await self.ledger_repo.update_status(
                            session_ref, LedgerStatus.COMPLETED, now
                        )
                except (SQLAlchemyError, InvalidStatusTransitionError) as e:
                    failure = e
                    logger.error(
                        f"Activation failed for checkout session {session_ref}: {e}",
                        extra={"session_ref": session_ref, "account_id": account.id},
                    )
                    await self._mark_failed(entry, now)
        except SQLAlchemyError as e:
            raise PersistenceFailureError(
                f"Could not persist checkout session {session_ref}"
            ) from e

        if failure is not None:
            raise PersistenceFailureError(
                f"Activation failed for checkout session {session_ref}"
            ) from failure

        return subscription

    async def _mark_failed(self, entry: LedgerEntry, now: datetime) -> None:
        # Best effort: if this fails too the entry stays PENDING for reconciliation
        if entry.status == LedgerStatus.FAILED:
            return
        try:
            async with savepoint():
                await self.ledger_repo.update_status(
                    entry.session_ref, LedgerStatus.FAILED, now
                )
        except (SQLAlchemyError, InvalidStatusTransitionError) as e:
            logger.error(
                f"Could not mark ledger entry {entry.session_ref} FAILED; left {entry.status.value}: {e}",
                extra={"session_ref": entry.session_ref, "account_id": entry.account_id},
            )
