from fastapi import FastAPI

from shared.config import settings
from shared.errors import install_error_handlers
from shared.observability import setup_observability
from .clients import InvoicesClient, NotificationsClient
from .repository import OrderStore, build_order_store
from .router import router
from .service import OrderService


def create_order_app(
    store: OrderStore = None,
    invoices: InvoicesClient = None,
    notifications: NotificationsClient = None,
) -> FastAPI:
    app = FastAPI(title="Order Service", version="1.0.0")

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(app, "order_service")
    install_error_handlers(app)

    # Backends are chosen once here, never per request
    store = store or build_order_store()
    invoices = invoices or InvoicesClient(settings.INVOICES_SERVICE_URL, settings.DOWNSTREAM_TIMEOUT_SECONDS)
    notifications = notifications or NotificationsClient(
        settings.NOTIFICATIONS_SERVICE_URL, settings.DOWNSTREAM_TIMEOUT_SECONDS
    )
    app.state.order_service = OrderService(store, invoices, notifications)

    app.include_router(router)

    @app.on_event("startup")
    async def startup_event():
        if hasattr(store, "ensure_schema"):
            await store.ensure_schema()

    return app


order_app = create_order_app()
