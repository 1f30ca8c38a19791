from shared.config import settings

from .base import Attachment, Mailer, MailResult, resolve_recipients
from .classify import classify_failure
from .console import ConsoleMailer
from .smtp import SmtpMailer

__all__ = [
    "Attachment",
    "Mailer",
    "MailResult",
    "resolve_recipients",
    "classify_failure",
    "ConsoleMailer",
    "SmtpMailer",
    "build_mailer"
]


def build_mailer() -> Mailer:
    """Pick the mail backend once at startup from MAIL_BACKEND."""
    if settings.MAIL_BACKEND == "smtp":
        return SmtpMailer(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            sender=settings.MAIL_FROM,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            use_tls=settings.SMTP_USE_TLS,
        )
    return ConsoleMailer()
