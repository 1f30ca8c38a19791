import structlog

from shared.mail import Mailer, resolve_recipients
from shared.observability import logistics_notifications_sent_total
from .schemas import NotificationResult, NotifyRequest
from .templates import KNOWN_STATUSES, get_template, html_to_text, render_html, render_subject

logger = structlog.get_logger(__name__)


class NotificationService:
    def __init__(self, mailer: Mailer, sandbox_recipient: str = ""):
        self.mailer = mailer
        self.sandbox_recipient = sandbox_recipient

    async def notify(self, req: NotifyRequest) -> NotificationResult:
        if req.status not in KNOWN_STATUSES:
            # Accepted anyway so new order states do not break notifications
            logger.warning("non_standard_status", order_id=req.orderId, status=req.status)

        template = get_template(req.status)
        html_body = render_html(template, req.orderId, req.status, req.customerName)
        recipients = resolve_recipients(req.customerEmail, self.sandbox_recipient)

        result = await self.mailer.send(
            recipients,
            render_subject(template, req.orderId, req.status),
            html_body,
            html_to_text(html_body),
        )

        outcome = "sent" if result.success else "failed"
        logistics_notifications_sent_total.labels(status=req.status, outcome=outcome).inc()
        logger.info(
            "notification_processed",
            order_id=req.orderId,
            status=req.status,
            outcome=outcome,
            error_type=result.errorType,
        )
        return NotificationResult(orderId=req.orderId, status=req.status, **result.model_dump())
