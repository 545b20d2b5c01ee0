"""
Telegram Bot API notifier.

Posts plain-text alerts to a bot chat. Without a bot token and chat id,
sending is a silent no-op.
"""

import httpx
import structlog

from gazette_watch.config.settings import TelegramSettings
from gazette_watch.core.errors import NotificationError

from .base import Alert
from .formatting import format_chat

logger = structlog.get_logger(__name__)

TELEGRAM_TIMEOUT = 10.0


class TelegramNotifier:
    """Chat transport for global alerts."""

    def __init__(self, settings: TelegramSettings, transport=None):
        self._settings = settings
        self._transport = transport

    @property
    def configured(self) -> bool:
        return self._settings.configured

    def _endpoint(self) -> str:
        return f"https://api.telegram.org/bot{self._settings.bot_token}/sendMessage"

    async def send(self, alert: Alert) -> bool:
        """Send the alert to the configured chat; False when unconfigured."""
        if not self.configured:
            logger.debug("telegram_not_configured", kind=alert.kind)
            return False

        payload = {
            "chat_id": self._settings.chat_id,
            "text": format_chat(alert),
            "disable_web_page_preview": True,
        }
        try:
            async with httpx.AsyncClient(
                timeout=TELEGRAM_TIMEOUT, transport=self._transport
            ) as client:
                response = await client.post(self._endpoint(), json=payload)
                response.raise_for_status()
        except httpx.HTTPError as e:
            # Error text may contain the token-bearing URL.
            message = str(e).replace(self._settings.bot_token, "***")
            raise NotificationError(
                f"Telegram delivery failed: {message}",
                recipient=self._settings.chat_id,
                source=alert.source,
            ) from e

        logger.info("telegram_sent", kind=alert.kind, source=alert.source)
        return True
