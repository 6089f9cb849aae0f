"""Transactional email delivery."""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Protocol

from config import MailSettings

logger = logging.getLogger(__name__)


class EmailError(Exception):
    """Base class for email delivery failures."""


class EmailConfigurationError(EmailError):
    """SMTP credentials are missing."""


class EmailDeliveryError(EmailError):
    """The SMTP server refused or dropped the message."""


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    text: str
    html: str


class Mailer(Protocol):
    def send(self, message: EmailMessage) -> None:
        """Deliver ``message`` or raise ``EmailError``."""


class SmtpMailer:
    """Send email through an authenticated SMTP relay."""

    def __init__(self, settings: MailSettings):
        self.settings = settings

    def send(self, message: EmailMessage) -> None:
        missing = self.settings.missing()
        if missing:
            logger.error(
                "Missing required settings for email service: %s", ", ".join(missing)
            )
            raise EmailConfigurationError("Email service is not configured.")

        msg = MIMEMultipart("alternative")
        msg["Subject"] = message.subject
        msg["From"] = self.settings.sender
        msg["To"] = message.to
        msg.attach(MIMEText(message.text, "plain", "utf-8"))
        msg.attach(MIMEText(message.html, "html", "utf-8"))

        try:
            with smtplib.SMTP(self.settings.host, self.settings.port, timeout=self.settings.timeout) as server:
                if self.settings.use_tls:
                    server.starttls()
                server.login(self.settings.username, self.settings.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise EmailDeliveryError(f"Failed to send email: {exc}") from exc

        logger.info("Email sent: %s", message.subject)
