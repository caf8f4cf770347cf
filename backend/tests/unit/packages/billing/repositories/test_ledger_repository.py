"""
Unit tests for LedgerRepository.
"""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from common.core.exceptions import NotFoundError
from common.db.scoped import transaction
from packages.billing.exceptions import InvalidStatusTransitionError, StateConflictError
from packages.billing.models.database.ledger import LedgerEntryEntity
from packages.billing.models.domain.enums import LedgerStatus, PlanId
from packages.billing.models.domain.ledger import LedgerEntryCreateModel
from packages.billing.repositories.ledger_repository import LedgerRepository

from tests.fixtures import T0


def _entry(account_id: int, session_ref: str, plan_id: PlanId = PlanId.SPOTLIGHT):
    return LedgerEntryCreateModel(
        account_id=account_id,
        session_ref=session_ref,
        plan_id=plan_id,
        amount_cents=25_000,
        currency="usd",
        description="Spotlight - 1 job post within 30 days",
    )


@pytest.mark.asyncio
class TestLedgerRepository:
    async def test_append_creates_pending_entry(self, sample_account):
        repo = LedgerRepository()

        entry = await repo.append(_entry(sample_account.id, "sess_append"))

        assert entry.id is not None
        assert entry.status == LedgerStatus.PENDING
        assert entry.plan_id == PlanId.SPOTLIGHT
        assert entry.amount_cents == 25_000

    async def test_duplicate_session_ref_raises_state_conflict(
        self, sample_account, test_db
    ):
        repo = LedgerRepository()
        await repo.append(_entry(sample_account.id, "sess_dup"))

        with pytest.raises(StateConflictError):
            await repo.append(_entry(sample_account.id, "sess_dup"))

        count = await test_db.execute(
            select(func.count(LedgerEntryEntity.id)).where(
                LedgerEntryEntity.session_ref == "sess_dup"
            )
        )
        assert count.scalar_one() == 1

    async def test_duplicate_inside_transaction_keeps_transaction_usable(
        self, sample_account
    ):
        repo = LedgerRepository()
        await repo.append(_entry(sample_account.id, "sess_tx"))

        async with transaction():
            with pytest.raises(StateConflictError):
                await repo.append(_entry(sample_account.id, "sess_tx"))
            existing = await repo.get_by_session_ref("sess_tx", for_update=True)
            assert existing is not None

    async def test_update_status_follows_allowed_transitions(self, sample_account):
        repo = LedgerRepository()
        await repo.append(_entry(sample_account.id, "sess_flow"))

        failed = await repo.update_status("sess_flow", LedgerStatus.FAILED, T0)
        assert failed.status == LedgerStatus.FAILED

        completed = await repo.update_status("sess_flow", LedgerStatus.COMPLETED, T0)
        assert completed.status == LedgerStatus.COMPLETED

        stored = await repo.get_by_session_ref("sess_flow")
        assert stored.status == LedgerStatus.COMPLETED

    async def test_update_status_rejects_invalid_transition(self, sample_account):
        repo = LedgerRepository()
        await repo.append(_entry(sample_account.id, "sess_bad"))
        await repo.update_status("sess_bad", LedgerStatus.COMPLETED)

        with pytest.raises(InvalidStatusTransitionError):
            await repo.update_status("sess_bad", LedgerStatus.PENDING)

        with pytest.raises(InvalidStatusTransitionError):
            await repo.update_status("sess_bad", LedgerStatus.FAILED)

    async def test_update_status_unknown_session(self):
        with pytest.raises(NotFoundError):
            await LedgerRepository().update_status("sess_missing", LedgerStatus.COMPLETED)

    async def test_list_for_account_newest_first(self, sample_account, create_account):
        repo = LedgerRepository()
        other = await create_account()
        for ref in ("sess_a", "sess_b", "sess_c"):
            await repo.append(_entry(sample_account.id, ref))
        await repo.append(_entry(other.id, "sess_other"))

        entries = await repo.list_for_account(sample_account.id)

        assert [e.session_ref for e in entries] == ["sess_c", "sess_b", "sess_a"]

    async def test_list_unreconciled(self, sample_account):
        repo = LedgerRepository()
        await repo.append(_entry(sample_account.id, "sess_pending"))
        await repo.append(_entry(sample_account.id, "sess_failed"))
        await repo.append(_entry(sample_account.id, "sess_done"))
        await repo.update_status("sess_failed", LedgerStatus.FAILED, T0)
        await repo.update_status("sess_done", LedgerStatus.COMPLETED, T0)

        # Server-stamped entries are "now"; a cutoff in the future includes them
        pending = await repo.get_by_session_ref("sess_pending")
        cutoff = pending.updated_at + timedelta(minutes=1)
        refs = {e.session_ref for e in await repo.list_unreconciled(cutoff)}

        assert refs == {"sess_pending", "sess_failed"}

    async def test_list_unreconciled_skips_recent(self, sample_account):
        repo = LedgerRepository()
        entry = await repo.append(_entry(sample_account.id, "sess_recent"))

        stale = await repo.list_unreconciled(entry.updated_at - timedelta(minutes=15))

        assert stale == []

    async def test_list_for_account_pages(self, sample_account):
        repo = LedgerRepository()
        refs = [f"sess_{i:03d}" for i in range(120)]
        for ref in refs:
            await repo.append(_entry(sample_account.id, ref))

        everything = await repo.list_for_account(sample_account.id)
        second_page = await repo.list_for_account(sample_account.id, limit=50, offset=50)

        assert len(everything) == 120
        assert [e.session_ref for e in second_page] == list(reversed(refs))[50:100]

    async def test_mark_rejected_hides_entry_from_reconciliation(self, sample_account):
        repo = LedgerRepository()
        entry = await repo.append(_entry(sample_account.id, "sess_unpaid"))
        await repo.append(_entry(sample_account.id, "sess_open"))

        assert await repo.mark_rejected("sess_unpaid", "payment_status=unpaid", T0)

        rejected = await repo.get_by_session_ref("sess_unpaid")
        assert rejected.status == LedgerStatus.FAILED
        assert rejected.rejected_at == T0
        assert rejected.rejection_reason == "payment_status=unpaid"

        cutoff = entry.updated_at + timedelta(days=1)
        refs = {e.session_ref for e in await repo.list_unreconciled(cutoff)}
        assert refs == {"sess_open"}

    async def test_mark_rejected_leaves_completed_entries(self, sample_account):
        repo = LedgerRepository()
        await repo.append(_entry(sample_account.id, "sess_done"))
        await repo.update_status("sess_done", LedgerStatus.COMPLETED, T0)

        assert not await repo.mark_rejected("sess_done", "late rejection", T0)
        assert (await repo.get_by_session_ref("sess_done")).status == LedgerStatus.COMPLETED

    async def test_completion_clears_rejection(self, sample_account):
        repo = LedgerRepository()
        await repo.append(_entry(sample_account.id, "sess_retry"))
        await repo.mark_rejected("sess_retry", "payment_status=unpaid", T0)

        completed = await repo.update_status("sess_retry", LedgerStatus.COMPLETED, T0)

        assert completed.rejected_at is None
        stored = await repo.get_by_session_ref("sess_retry")
        assert stored.rejected_at is None
        assert stored.rejection_reason is None
