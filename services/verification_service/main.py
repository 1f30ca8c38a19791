from fastapi import FastAPI

from shared.config import settings
from shared.errors import install_error_handlers
from shared.observability import setup_observability
from .repository import VerificationRepository
from .router import router
from .service import VerificationService


def create_verification_app(uploads_dir: str = None) -> FastAPI:
    app = FastAPI(title="Verification Service", version="1.0.0")

    # --- OBSERVABILITY BOOTSTRAP ---
    setup_observability(app, "verification_service")
    install_error_handlers(app)

    app.state.verification_service = VerificationService(
        VerificationRepository(), uploads_dir or settings.UPLOADS_DIR
    )
    app.include_router(router)
    return app


verification_app = create_verification_app()
