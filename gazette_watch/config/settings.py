"""
Runtime settings read from the environment.

Secrets (SMTP password, bot token) only ever come from the environment;
source definitions live in sources.yml.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from gazette_watch.core.normalizer import parse_terms


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class SmtpSettings:
    """SMTP transport settings; incomplete settings disable email."""
    host: Optional[str] = None
    port: int = 587
    user: Optional[str] = None
    password: Optional[str] = None
    sender: Optional[str] = None
    default_to: Optional[str] = None

    @property
    def configured(self) -> bool:
        return bool(self.host and self.user and self.password)


@dataclass(frozen=True)
class TelegramSettings:
    """Telegram Bot API settings; incomplete settings disable chat."""
    bot_token: Optional[str] = None
    chat_id: Optional[str] = None

    @property
    def configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)


@dataclass(frozen=True)
class Settings:
    """Settings for one invocation."""
    terms: list[str] = field(default_factory=list)
    send_empty: bool = False
    store_dir: str = ".gazette-watch"
    history_cap: int = 300
    timezone: str = "America/Fortaleza"
    smtp: SmtpSettings = field(default_factory=SmtpSettings)
    telegram: TelegramSettings = field(default_factory=TelegramSettings)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read (defaults to os.environ)

        Returns:
            Settings instance
        """
        env = os.environ if environ is None else environ

        return cls(
            terms=parse_terms(env.get("TERMS")),
            send_empty=_flag(env.get("SEND_EMPTY")),
            store_dir=env.get("STORE_DIR") or ".gazette-watch",
            history_cap=int(env.get("HISTORY_CAP") or 300),
            timezone=env.get("TIMEZONE") or "America/Fortaleza",
            smtp=SmtpSettings(
                host=env.get("SMTP_HOST") or None,
                port=int(env.get("SMTP_PORT") or 587),
                user=env.get("SMTP_USER") or None,
                password=env.get("SMTP_PASS") or None,
                sender=env.get("MAIL_FROM") or None,
                default_to=env.get("MAIL_TO") or None,
            ),
            telegram=TelegramSettings(
                bot_token=env.get("TG_BOT_TOKEN") or None,
                chat_id=env.get("TG_CHAT_ID") or None,
            ),
        )
