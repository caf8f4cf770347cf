"""
Unit tests for the k8s probe endpoints.
"""

import pytest
from sqlalchemy.exc import OperationalError


@pytest.mark.asyncio
class TestProbes:
    async def test_healthz(self, anonymous_client):
        response = await anonymous_client.get("/healthz")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    async def test_readyz(self, anonymous_client):
        response = await anonymous_client.get("/readyz")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    async def test_readyz_database_down(self, anonymous_client, monkeypatch):
        def broken_factory():
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        monkeypatch.setattr("common.db.scoped.AsyncSessionLocalReadonly", broken_factory)

        response = await anonymous_client.get("/readyz")

        assert response.status_code == 503
