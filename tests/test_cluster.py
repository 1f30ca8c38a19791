import pytest
from httpx import ASGITransport, AsyncClient

from main import app


@pytest.mark.api
@pytest.mark.asyncio
async def test_cluster_mounts_every_service():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://cluster") as client:
        assert (await client.get("/health")).json()["status"] == "healthy"
        assert (await client.get("/orders-service/health")).json()["storage"] == "in-memory"
        assert (await client.get("/invoices-service/health")).json()["service"] == "invoices"
        assert (await client.get("/notifications-service/health")).json()["mailer"] == "console"
        assert (await client.get("/verification-service/health")).json()["status"] == "running"
