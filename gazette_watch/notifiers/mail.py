"""
SMTP email notifier.

Sends HTML alerts through smtplib. Without SMTP credentials, or without a
recipient, sending is a silent no-op.
"""

import asyncio
import smtplib
from email.message import EmailMessage
from typing import Optional

import structlog

from gazette_watch.config.settings import SmtpSettings
from gazette_watch.core.errors import NotificationError

from .base import Alert
from .formatting import format_html, format_subject

logger = structlog.get_logger(__name__)

SMTP_TIMEOUT = 30


class EmailNotifier:
    """Email transport for global and group-scoped alerts."""

    def __init__(self, settings: SmtpSettings):
        self._settings = settings

    @property
    def configured(self) -> bool:
        return self._settings.configured

    def build_message(self, alert: Alert, to: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = format_subject(alert)
        message["From"] = self._settings.sender or self._settings.user
        message["To"] = to
        message.set_content(f"{format_subject(alert)}\n{alert.url}")
        message.add_alternative(format_html(alert), subtype="html")
        return message

    async def send(self, alert: Alert, to: Optional[str] = None) -> bool:
        """
        Send an alert by email.

        Args:
            alert: Alert to deliver
            to: Recipient(s); defaults to MAIL_TO

        Returns:
            True if a message was sent, False if email is not configured

        Raises:
            NotificationError: If the SMTP exchange fails
        """
        recipient = to or self._settings.default_to
        if not self.configured or not recipient:
            logger.debug("email_not_configured", kind=alert.kind)
            return False

        message = self.build_message(alert, recipient)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(
                f"Email delivery failed: {e}", recipient=recipient, source=alert.source
            ) from e

        logger.info("email_sent", kind=alert.kind, to=recipient, source=alert.source)
        return True

    def _deliver(self, message: EmailMessage) -> None:
        settings = self._settings
        with smtplib.SMTP(settings.host, settings.port, timeout=SMTP_TIMEOUT) as smtp:
            smtp.ehlo()
            if smtp.has_extn("starttls"):
                smtp.starttls()
                smtp.ehlo()
            smtp.login(settings.user, settings.password)
            smtp.send_message(message)
