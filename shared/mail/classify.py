"""
Maps provider failures onto a small set of categories, each with a hint an
operator can act on.
"""
import smtplib
from typing import Tuple

REJECTED_CONTENT = "rejected_content"
UNVERIFIED_IDENTITY = "unverified_identity"
RATE_LIMITED = "rate_limited"
AUTH_FAILURE = "auth_failure"
UNKNOWN = "unknown"

SUGGESTIONS = {
    REJECTED_CONTENT: "The provider rejected the message. Check the recipient address and the message content.",
    UNVERIFIED_IDENTITY: "Verify the sender address or domain with the mail provider, or set MAIL_SANDBOX_RECIPIENT to a verified address.",
    RATE_LIMITED: "The provider is throttling this account. Wait and resend, or raise the sending quota.",
    AUTH_FAILURE: "Check SMTP_USERNAME and SMTP_PASSWORD.",
    UNKNOWN: "Check the notifications service logs for the provider response.",
}

# SMTP reply codes that mean "slow down"
_THROTTLE_CODES = {421, 450, 451, 452}


def _smtp_code(exc: Exception) -> int:
    code = getattr(exc, "smtp_code", None)
    if code is None and isinstance(exc, smtplib.SMTPRecipientsRefused):
        codes = [c for c, _ in exc.recipients.values()]
        code = codes[0] if codes else None
    return code or 0


def classify_failure(exc: Exception) -> Tuple[str, str]:
    """Return (errorType, suggestion) for a failed send."""
    if isinstance(exc, smtplib.SMTPAuthenticationError):
        kind = AUTH_FAILURE
    elif _smtp_code(exc) in _THROTTLE_CODES:
        kind = RATE_LIMITED
    elif isinstance(exc, smtplib.SMTPSenderRefused):
        kind = UNVERIFIED_IDENTITY
    elif isinstance(exc, (smtplib.SMTPRecipientsRefused, smtplib.SMTPDataError)):
        kind = REJECTED_CONTENT
    else:
        kind = UNKNOWN
    return kind, SUGGESTIONS[kind]
