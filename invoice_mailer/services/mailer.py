"""
SMTP mailer for sending merged invoice bundles (Gmail app password).
"""

import smtplib
from email.message import EmailMessage
from typing import Protocol

from invoice_mailer.config import settings
from invoice_mailer.core.logging import get_logger
from invoice_mailer.core.models import OutboundMessage

log = get_logger(__name__)


class Mailer(Protocol):
    """Message dispatch capability. send() raises on failure."""

    def send(self, message: OutboundMessage) -> None: ...


def build_email(message: OutboundMessage) -> EmailMessage:
    """Convert an OutboundMessage into a MIME message with attachments."""
    email = EmailMessage()
    email["From"] = message.sender
    email["To"] = message.to
    email["Subject"] = message.subject
    email.set_content(message.body)

    for attachment in message.attachments:
        maintype, _, subtype = attachment.content_type.partition("/")
        email.add_attachment(
            attachment.content,
            maintype=maintype,
            subtype=subtype or "octet-stream",
            filename=attachment.filename,
        )
    return email


class SmtpMailer:
    """Sends mail through an SMTP-over-SSL server."""

    def __init__(
        self,
        user: str | None = None,
        password: str | None = None,
        host: str | None = None,
        port: int | None = None,
        timeout: float = 60,
    ):
        self.user = user or settings.admin_email
        self.password = password or settings.gmail_app_password
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        """Check if SMTP credentials are configured."""
        return bool(self.user and self.password)

    def send(self, message: OutboundMessage) -> None:
        """
        Send one message.

        Raises:
            RuntimeError: mailer not configured
            smtplib.SMTPException, OSError: connection, auth or send failure
        """
        if not self.enabled:
            raise RuntimeError("SMTP mailer not configured")

        email = build_email(message)
        with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.login(self.user, self.password)
            smtp.send_message(email)

        log.info(
            "email_sent",
            to=message.to,
            subject=message.subject,
            attachments=len(message.attachments),
        )
