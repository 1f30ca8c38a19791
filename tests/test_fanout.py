"""
Partial-failure behaviour of the order fan-out: a downstream outage never
turns into a failed order, and a storage fault stops everything.
"""
import pytest
from httpx import ASGITransport, AsyncClient

from services.order_service.clients import InvoicesClient, NotificationsClient
from services.order_service.fanout import FanOut
from services.order_service.main import create_order_app
from services.order_service.repository import InMemoryOrderStore
from shared.errors import StorageError


class BrokenStore(InMemoryOrderStore):
    async def create(self, order):
        raise StorageError("table unreachable")


def _app(store, invoices_transport, notifications_transport):
    return create_order_app(
        store=store,
        invoices=InvoicesClient("http://invoices", transport=invoices_transport),
        notifications=NotificationsClient("http://notifications", transport=notifications_transport),
    )


class TestFanOutRunner:

    @pytest.mark.asyncio
    async def test_failing_step_does_not_stop_later_steps(self):
        ran = []

        async def boom(ctx):
            ran.append("boom")
            raise RuntimeError("downstream exploded")

        async def fine(ctx):
            ran.append("fine")
            return {"ok": True}

        results = await FanOut().add_step("boom", boom).add_step("fine", fine).execute({"order_id": "o-1"})

        assert ran == ["boom", "fine"]
        assert results["boom"].ok is False
        assert results["boom"].error == "downstream exploded"
        assert results["fine"].ok is True
        assert results["fine"].value == {"ok": True}

    @pytest.mark.asyncio
    async def test_error_without_message_falls_back_to_type_name(self):
        async def silent(ctx):
            raise TimeoutError()

        results = await FanOut().add_step("silent", silent).execute({})
        assert results["silent"].error == "TimeoutError"


class TestDownstreamOutage:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_order_is_created_when_both_services_are_down(self, unreachable_transport, order_payload):
        store = InMemoryOrderStore()
        app = _app(store, unreachable_transport, unreachable_transport)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            resp = await client.post("/orders", json=order_payload)

        assert resp.status_code == 201
        data = resp.json()
        assert await store.get(data["orderId"]) is not None
        assert data["invoice"]["generated"] is False
        assert "connection refused" in data["invoice"]["error"]
        assert data["notification"]["sent"] is False
        assert "connection refused" in data["notification"]["error"]
        # push replica, generate invoice, notify customer
        assert len(unreachable_transport.calls) == 3

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_invoice_outage_does_not_block_notification(
        self, unreachable_transport, notification_app, mailer, order_payload
    ):
        app = _app(InMemoryOrderStore(), unreachable_transport, ASGITransport(app=notification_app))

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            data = (await client.post("/orders", json=order_payload)).json()

        assert data["invoice"]["generated"] is False
        assert data["notification"]["sent"] is True
        assert data["notification"]["details"]["recipients"] == ["ada@example.com"]

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_status_patch_succeeds_when_notifications_are_down(self, unreachable_transport, order_payload):
        store = InMemoryOrderStore()
        app = _app(store, unreachable_transport, unreachable_transport)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            order_id = (await client.post("/orders", json=order_payload)).json()["orderId"]
            resp = await client.patch(f"/orders/{order_id}/status", json={"status": "shipped"})

        assert resp.status_code == 200
        assert (await store.get(order_id))["status"] == "shipped"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_on_demand_invoice_reports_500_when_invoices_down(self, unreachable_transport, order_payload):
        app = _app(InMemoryOrderStore(), unreachable_transport, unreachable_transport)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            order_id = (await client.post("/orders", json=order_payload)).json()["orderId"]
            resp = await client.post(f"/orders/{order_id}/invoice")

        assert resp.status_code == 500
        assert resp.json()["message"] == "Failed to generate invoice"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_invoice_for_unknown_order_is_reported_not_raised(self, invoice_app, notification_app, order_payload):
        # Replica push goes nowhere, so the invoices service has never seen the order
        class DroppingInvoices(InvoicesClient):
            async def push_order(self, order):
                return {}

        app = create_order_app(
            store=InMemoryOrderStore(),
            invoices=DroppingInvoices("http://invoices", transport=ASGITransport(app=invoice_app)),
            notifications=NotificationsClient("http://notifications", transport=ASGITransport(app=notification_app)),
        )
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            data = (await client.post("/orders", json=order_payload)).json()

        assert data["invoice"]["generated"] is False
        assert "Order not found" in data["invoice"]["error"]


class TestStorageFault:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_storage_fault_fails_request_without_side_effects(self, unreachable_transport, order_payload):
        app = _app(BrokenStore(), unreachable_transport, unreachable_transport)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            resp = await client.post("/orders", json=order_payload)

        assert resp.status_code == 500
        assert resp.json()["error"] == "Storage backend unavailable"
        assert unreachable_transport.calls == []
