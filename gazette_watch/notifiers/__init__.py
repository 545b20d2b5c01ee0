"""
Notification transports.

- mail: SMTP alerts (global and group-scoped)
- telegram: Bot API chat alerts (global)
"""

from .base import Alert
from .mail import EmailNotifier
from .telegram import TelegramNotifier

__all__ = ["Alert", "EmailNotifier", "TelegramNotifier"]
