from fastapi import FastAPI

from services.order_service.repository import OrderStore, build_order_store
from shared.config import settings
from shared.errors import install_error_handlers
from shared.mail import Mailer, build_mailer
from shared.observability import setup_observability
from .renderer import InvoiceRenderer
from .router import router
from .service import InvoiceService
from .storage import ArtifactStore, build_artifact_store


def create_invoice_app(
    store: OrderStore = None,
    artifacts: ArtifactStore = None,
    mailer: Mailer = None,
) -> FastAPI:
    app = FastAPI(title="Invoice Service", version="1.0.0")

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(app, "invoice_service")
    install_error_handlers(app)

    # In memory mode this store only holds replicas pushed by the orders service
    store = store or build_order_store()
    app.state.invoice_service = InvoiceService(
        store,
        InvoiceRenderer(),
        artifacts or build_artifact_store(),
        mailer or build_mailer(),
        sandbox_recipient=settings.MAIL_SANDBOX_RECIPIENT,
    )

    app.include_router(router)

    @app.on_event("startup")
    async def startup_event():
        if hasattr(store, "ensure_schema"):
            await store.ensure_schema()

    return app


invoice_app = create_invoice_app()
