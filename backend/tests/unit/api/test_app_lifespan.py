"""
Unit tests for the API application lifespan.
"""

from unittest.mock import AsyncMock

import pytest

from api.main import app, lifespan


@pytest.mark.asyncio
class TestLifespan:
    async def test_startup_only_logs_and_shutdown_closes_queue(self, monkeypatch):
        close = AsyncMock()
        monkeypatch.setattr("api.main.close_message_queue", close)

        async with lifespan(app):
            # Schema comes from Alembic, so startup awaits nothing
            close.assert_not_awaited()

        close.assert_awaited_once()
