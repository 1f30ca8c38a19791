"""
Shared fixtures.

Every service runs in-process: the orders app reaches the invoices and
notifications apps through httpx ASGI transports, so a full create-order
fan-out happens without opening a socket.
"""
import os

# Settings are read at import time, so pin them before any service module loads
os.environ["APP_ENV"] = "development"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["MAIL_BACKEND"] = "console"
os.environ["ARTIFACT_BACKEND"] = "local"
os.environ["MAIL_SANDBOX_RECIPIENT"] = ""
os.environ["OTLP_ENDPOINT"] = ""

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from services.invoice_service.main import create_invoice_app
from services.invoice_service.storage import LocalArtifactStore
from services.notification_service.main import create_notification_app
from services.order_service.clients import InvoicesClient, NotificationsClient
from services.order_service.main import create_order_app
from services.order_service.repository import InMemoryOrderStore
from shared.mail import ConsoleMailer


@pytest.fixture
def order_payload() -> dict:
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "phoneNumber": "+1 555 0100",
        "address": "12 Analytical Way",
        "city": "Springfield",
        "state": "IL",
        "country": "USA",
        "zipCode": "62701",
        "payment": {
            "cardFirstName": "Ada",
            "cardLastName": "Lovelace",
            "cardNumber": "4111 1111 1111 1111",
            "securityNumber": "123",
            "expDate": "12/29",
        },
        "product": "Difference Engine",
        "price": 99.99,
        "shippingCost": 10.00,
    }


@pytest.fixture
def mailer() -> ConsoleMailer:
    return ConsoleMailer()


@pytest.fixture
def exports_dir(tmp_path):
    return tmp_path / "exports"


@pytest.fixture
def invoice_store() -> InMemoryOrderStore:
    return InMemoryOrderStore()


@pytest.fixture
def invoice_app(invoice_store, exports_dir, mailer):
    return create_invoice_app(
        store=invoice_store,
        artifacts=LocalArtifactStore(str(exports_dir), "http://invoices"),
        mailer=mailer,
    )


@pytest.fixture
def notification_app(mailer):
    return create_notification_app(mailer=mailer, sandbox_recipient="")


@pytest.fixture
def order_store() -> InMemoryOrderStore:
    return InMemoryOrderStore()


@pytest.fixture
def order_app(order_store, invoice_app, notification_app):
    return create_order_app(
        store=order_store,
        invoices=InvoicesClient("http://invoices", transport=ASGITransport(app=invoice_app)),
        notifications=NotificationsClient("http://notifications", transport=ASGITransport(app=notification_app)),
    )


@pytest.fixture
def unreachable_transport():
    """Transport that behaves like a service that is down."""
    calls = []

    def handler(request: httpx.Request):
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    transport = httpx.MockTransport(handler)
    transport.calls = calls
    return transport


@pytest_asyncio.fixture
async def client(order_app):
    async with AsyncClient(transport=ASGITransport(app=order_app), base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def invoice_client(invoice_app):
    async with AsyncClient(transport=ASGITransport(app=invoice_app), base_url="http://invoices") as c:
        yield c


@pytest_asyncio.fixture
async def notification_client(notification_app):
    async with AsyncClient(transport=ASGITransport(app=notification_app), base_url="http://notifications") as c:
        yield c
