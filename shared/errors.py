"""
Error taxonomy shared by every service.

Validation problems are reported as 400 with one entry per field, unknown
orders as 404, and storage faults as 500. Downstream collaborator failures
never reach these handlers: they are folded into the response body by the
caller.
"""
import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class StorageError(Exception):
    """Raised when the order store backend cannot be reached or fails."""
    pass


class OrderNotFound(Exception):
    """Raised when an orderId has no stored order."""

    def __init__(self, order_id: str):
        super().__init__(f"Order not found: {order_id}")
        self.order_id = order_id


def _field_path(loc) -> str:
    # Drop the request section ("body", "path", "query") FastAPI prefixes
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


def format_validation_errors(exc: RequestValidationError) -> list[dict]:
    errors = []
    for err in exc.errors():
        message = err.get("msg", "Invalid value")
        # pydantic prefixes messages raised from validators
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": _field_path(err.get("loc", ())), "message": message})
    return errors


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = format_validation_errors(exc)
    logger.info("validation_failed", path=request.url.path, errors=errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})


async def storage_exception_handler(request: Request, exc: StorageError):
    logger.error("storage_fault", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Storage backend unavailable", "details": str(exc)},
    )


async def not_found_exception_handler(request: Request, exc: OrderNotFound):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Order not found"})


def install_error_handlers(app: FastAPI):
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StorageError, storage_exception_handler)
    app.add_exception_handler(OrderNotFound, not_found_exception_handler)
