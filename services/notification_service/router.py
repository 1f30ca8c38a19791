import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from shared.config import settings
from .schemas import EMAIL_RE, NotifyRequest, SampleNotificationRequest
from .service import NotificationService

router = APIRouter()


def get_notification_service(request: Request) -> NotificationService:
    return request.app.state.notification_service


def _response(result):
    if result.success:
        return {"message": "Notification sent", "success": True, "details": result.model_dump()}
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"message": "Failed to send notification", "success": False, "details": result.model_dump()},
    )


@router.get("/health")
async def health_check(service: NotificationService = Depends(get_notification_service)):
    return {
        "status": "ok",
        "service": "notifications",
        "environment": settings.APP_ENV,
        "mailer": service.mailer.name,
        "sandboxed": bool(service.sandbox_recipient),
    }


@router.post("/notify")
async def notify(payload: NotifyRequest, service: NotificationService = Depends(get_notification_service)):
    return _response(await service.notify(payload))


@router.post("/test-notification")
async def test_notification(
    payload: SampleNotificationRequest, service: NotificationService = Depends(get_notification_service)
):
    email = payload.email or service.sandbox_recipient
    if not email or not EMAIL_RE.match(email):
        raise HTTPException(status_code=400, detail="A valid email (or MAIL_SANDBOX_RECIPIENT) is required")

    req = NotifyRequest(
        orderId=f"TEST-{uuid.uuid4().hex[:8].upper()}",
        customerEmail=email,
        status=payload.status,
        customerName="Test Customer",
    )
    return _response(await service.notify(req))
