"""
Configuration module.

Provides:
- YAML source definitions with environment variable substitution
- Environment-driven runtime settings
"""

from .loader import ConfigLoader, load_sources, primary_source
from .settings import Settings, SmtpSettings, TelegramSettings

__all__ = [
    "ConfigLoader",
    "load_sources",
    "primary_source",
    "Settings",
    "SmtpSettings",
    "TelegramSettings",
]
