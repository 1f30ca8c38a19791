import re
from typing import Optional

from pydantic import BaseModel, field_validator

from shared.mail import MailResult

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _not_blank(v: str) -> str:
    if not v.strip():
        raise ValueError("must not be empty")
    return v.strip()


class NotifyRequest(BaseModel):
    orderId: str
    customerEmail: str
    status: str
    customerName: Optional[str] = None

    @field_validator("orderId", "status")
    @classmethod
    def not_blank(cls, v):
        return _not_blank(v)

    @field_validator("customerEmail")
    @classmethod
    def valid_email(cls, v):
        if not EMAIL_RE.match(v.strip()):
            raise ValueError("Valid email is required")
        return v.strip()


class SampleNotificationRequest(BaseModel):
    email: Optional[str] = None
    status: str = "received"

    @field_validator("status")
    @classmethod
    def not_blank(cls, v):
        return _not_blank(v)


class NotificationResult(MailResult):
    orderId: str
    status: str
