import uuid
from collections import deque
from typing import Optional, Sequence

import structlog

from .base import Attachment, Mailer, MailResult

logger = structlog.get_logger(__name__)


class ConsoleMailer(Mailer):
    """Development mailer: logs each message and keeps it in an outbox."""

    name = "console"

    def __init__(self, max_outbox: int = 500):
        # Oldest messages drop off once full
        self.outbox: deque = deque(maxlen=max_outbox)

    async def send(
        self,
        recipients: Sequence[str],
        subject: str,
        html_body: str,
        text_body: Optional[str] = None,
        attachments: Sequence[Attachment] = (),
    ) -> MailResult:
        message_id = f"console-{uuid.uuid4().hex[:12]}"
        self.outbox.append({
            "messageId": message_id,
            "recipients": list(recipients),
            "subject": subject,
            "html": html_body,
            "text": text_body,
            "attachments": [name for name, _, _ in attachments],
        })
        logger.info(
            "email_logged",
            message_id=message_id,
            recipients=list(recipients),
            subject=subject,
            attachments=len(attachments),
        )
        return MailResult(success=True, messageId=message_id, recipients=list(recipients))
