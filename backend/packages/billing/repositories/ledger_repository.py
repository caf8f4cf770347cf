"""
Repository for the billing ledger.
"""

from typing import Optional
from datetime import datetime, timezone
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from common.repositories.base import BaseRepository
from packages.billing.exceptions import InvalidStatusTransitionError, StateConflictError
from packages.billing.models.database.ledger import LedgerEntryEntity
from packages.billing.models.domain.ledger import LedgerEntry, LedgerEntryCreateModel
from packages.billing.models.domain.enums import LedgerStatus
from common.core.exceptions import NotFoundError
from common.core.otel_axiom_exporter import trace_span, get_logger

logger = get_logger(__name__)


class LedgerRepository(BaseRepository[LedgerEntryEntity, LedgerEntry]):
    """Repository for billing ledger entries. Entries are never deleted."""

    def __init__(self):
        super().__init__(LedgerEntryEntity, LedgerEntry)

    @trace_span
    async def append(self, entry: LedgerEntryCreateModel) -> LedgerEntry:
        """
        Insert a new entry.

        The insert runs in a savepoint so a duplicate session_ref leaves the
        enclosing transaction usable.

        Raises:
            StateConflictError: If an entry with this session_ref already exists
        """
        db_entry = LedgerEntryEntity(**entry.model_dump(exclude_none=True))
        async with self._get_session() as session:
            try:
                async with session.begin_nested():
                    session.add(db_entry)
                    await session.flush()
            except IntegrityError:
                raise StateConflictError(
                    f"Ledger entry for session {entry.session_ref} already exists"
                )
            await session.refresh(db_entry)
            return self._entity_to_domain(db_entry)

    @trace_span
    async def get_by_session_ref(
        self, session_ref: str, for_update: bool = False
    ) -> Optional[LedgerEntry]:
        query = select(LedgerEntryEntity).where(
            LedgerEntryEntity.session_ref == session_ref
        )
        if for_update:
            query = query.with_for_update()

        async with self._get_session() as session:
            result = await session.execute(
                query.execution_options(populate_existing=True)
            )
            db_entry = result.scalar_one_or_none()
            return self._entity_to_domain(db_entry) if db_entry else None

    @trace_span
    async def update_status(
        self,
        session_ref: str,
        status: LedgerStatus,
        now: Optional[datetime] = None,
    ) -> LedgerEntry:
        """
        Move an entry to a new status.

        The UPDATE is conditional on the status read here, so a concurrent
        change between read and write is reported instead of overwritten.

        Raises:
            NotFoundError: If no entry has this session_ref
            InvalidStatusTransitionError: If the transition is not allowed
        """
        now = now or datetime.now(timezone.utc)
        current = await self.get_by_session_ref(session_ref)
        if current is None:
            raise NotFoundError(f"No ledger entry for session {session_ref}")

        if not current.status.can_transition_to(status):
            raise InvalidStatusTransitionError(
                f"Ledger entry {session_ref}: {current.status.value} -> {status.value} not allowed"
            )

        changes = {"status": status, "updated_at": now}
        if status == LedgerStatus.COMPLETED:
            changes.update(rejected_at=None, rejection_reason=None)

        async with self._get_session() as session:
            result = await session.execute(
                update(LedgerEntryEntity)
                .where(
                    LedgerEntryEntity.session_ref == session_ref,
                    LedgerEntryEntity.status == current.status.value,
                )
                .values(**{**changes, "status": status.value})
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise InvalidStatusTransitionError(
                    f"Ledger entry {session_ref} changed concurrently from {current.status.value}"
                )

        logger.info(
            f"Ledger entry {session_ref}: {current.status.value} -> {status.value}",
            extra={"session_ref": session_ref, "account_id": current.account_id},
        )
        return current.model_copy(update=changes)

    @trace_span
    async def mark_rejected(
        self, session_ref: str, reason: str, now: Optional[datetime] = None
    ) -> bool:
        """
        Record a terminal provider rejection on an unfinished entry.

        A PENDING entry moves to FAILED. Returns False when the entry is no
        longer PENDING or FAILED (a concurrent delivery completed it).
        """
        now = now or datetime.now(timezone.utc)
        async with self._get_session() as session:
            result = await session.execute(
                update(LedgerEntryEntity)
                .where(
                    LedgerEntryEntity.session_ref == session_ref,
                    LedgerEntryEntity.status.in_(
                        [LedgerStatus.PENDING.value, LedgerStatus.FAILED.value]
                    ),
                )
                .values(
                    status=LedgerStatus.FAILED.value,
                    rejected_at=now,
                    rejection_reason=reason[:500],
                    updated_at=now,
                )
                .execution_options(synchronize_session=False)
            )
        if result.rowcount:
            logger.warning(
                f"Ledger entry {session_ref} rejected by provider: {reason}",
                extra={"session_ref": session_ref},
            )
        return bool(result.rowcount)

    @trace_span
    async def list_for_account(
        self, account_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> list[LedgerEntry]:
        """Entries for an account, newest first. Unbounded unless limit is given."""
        query = (
            select(LedgerEntryEntity)
            .where(LedgerEntryEntity.account_id == account_id)
            .order_by(LedgerEntryEntity.created_at.desc(), LedgerEntryEntity.id.desc())
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)
        async with self._get_session() as session:
            result = await session.execute(query)
            return self._entities_to_domain(result.scalars().all())

    @trace_span
    async def list_unreconciled(
        self, older_than: datetime, limit: int = 100
    ) -> list[LedgerEntry]:
        """PENDING or FAILED entries last touched before older_than, oldest first.

        Entries marked rejected are left out.
        """
        async with self._get_session() as session:
            result = await session.execute(
                select(LedgerEntryEntity)
                .where(
                    LedgerEntryEntity.status.in_(
                        [LedgerStatus.PENDING.value, LedgerStatus.FAILED.value]
                    ),
                    LedgerEntryEntity.updated_at < older_than,
                    LedgerEntryEntity.rejected_at.is_(None),
                )
                .order_by(LedgerEntryEntity.updated_at.asc(), LedgerEntryEntity.id.asc())
                .limit(limit)
            )
            return self._entities_to_domain(result.scalars().all())
