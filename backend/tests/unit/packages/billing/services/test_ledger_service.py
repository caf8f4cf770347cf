"""
Unit tests for LedgerService billing history.
"""

import pytest

from packages.billing.models.domain.enums import LedgerStatus
from packages.billing.services.ledger_service import LedgerService

from tests.fixtures import T0


@pytest.mark.asyncio
class TestLedgerService:
    async def test_history_lists_completed_and_failed_attempts(
        self, sample_account, payment_provider, payment_event_service
    ):
        payment_provider.add_session("sess_1", sample_account.id, "SPOTLIGHT")
        payment_provider.add_session("sess_2", sample_account.id, "BUNDLE")
        await payment_event_service.handle_confirmed_payment("sess_1", now=T0)
        await payment_event_service.handle_confirmed_payment("sess_2", now=T0)

        history = await LedgerService().list_billing_history(sample_account.id)

        assert [e.session_ref for e in history] == ["sess_2", "sess_1"]
        assert all(e.status == LedgerStatus.COMPLETED for e in history)

    async def test_history_empty(self, sample_account):
        assert await LedgerService().list_billing_history(sample_account.id) == []
