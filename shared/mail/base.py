"""Mailer port: send(recipients, subject, html) -> MailResult."""
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple
from pydantic import BaseModel

# (filename, content, mime type)
Attachment = Tuple[str, bytes, str]


class MailResult(BaseModel):
    success: bool
    messageId: Optional[str] = None
    recipients: List[str] = []
    error: Optional[str] = None
    errorType: Optional[str] = None
    suggestion: Optional[str] = None


class Mailer(ABC):
    """Outbound email. Implementations return failures, they never raise."""

    name = "mailer"

    @abstractmethod
    async def send(
        self,
        recipients: Sequence[str],
        subject: str,
        html_body: str,
        text_body: Optional[str] = None,
        attachments: Sequence[Attachment] = (),
    ) -> MailResult:
        ...


def resolve_recipients(address: str, sandbox_recipient: str = "") -> List[str]:
    """A sandboxed provider only delivers to verified addresses, so swap in the verified one."""
    return [sandbox_recipient] if sandbox_recipient else [address]
