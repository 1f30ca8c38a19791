from fastapi import FastAPI

from shared.config import settings
from shared.errors import install_error_handlers
from shared.mail import Mailer, build_mailer
from shared.observability import setup_observability
from .router import router
from .service import NotificationService


def create_notification_app(mailer: Mailer = None, sandbox_recipient: str = None) -> FastAPI:
    app = FastAPI(title="Notification Service", version="1.0.0")

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(app, "notification_service")
    install_error_handlers(app)

    app.state.notification_service = NotificationService(
        mailer or build_mailer(),
        sandbox_recipient=settings.MAIL_SANDBOX_RECIPIENT if sandbox_recipient is None else sandbox_recipient,
    )
    app.include_router(router)
    return app


notification_app = create_notification_app()
