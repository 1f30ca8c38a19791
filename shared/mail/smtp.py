import asyncio
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Optional, Sequence

import structlog

from .base import Attachment, Mailer, MailResult
from .classify import classify_failure

logger = structlog.get_logger(__name__)


class SmtpMailer(Mailer):
    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def build_message(self, recipients, subject, html_body, text_body, attachments) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = ", ".join(recipients)
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid(domain=self.sender.split("@")[-1])
        msg.set_content(text_body or "")
        msg.add_alternative(html_body, subtype="html")
        for filename, content, mime_type in attachments:
            maintype, _, subtype = mime_type.partition("/")
            msg.add_attachment(content, maintype=maintype, subtype=subtype, filename=filename)
        return msg

    def _deliver(self, msg: EmailMessage):
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username:
                server.login(self.username, self.password)
            server.send_message(msg)

    async def send(
        self,
        recipients: Sequence[str],
        subject: str,
        html_body: str,
        text_body: Optional[str] = None,
        attachments: Sequence[Attachment] = (),
    ) -> MailResult:
        msg = self.build_message(recipients, subject, html_body, text_body, attachments)
        try:
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as e:
            error_type, suggestion = classify_failure(e)
            logger.error("email_send_failed", recipients=list(recipients), error=str(e), error_type=error_type)
            return MailResult(
                success=False,
                recipients=list(recipients),
                error=str(e),
                errorType=error_type,
                suggestion=suggestion,
            )

        logger.info("email_sent", recipients=list(recipients), message_id=msg["Message-ID"])
        return MailResult(success=True, messageId=msg["Message-ID"], recipients=list(recipients))
