"""
Base class for collector strategies.

Collectors implement the discovery phase: find the current edition of a
source and describe it as DocumentMetadata (URL, edition label, dedup key).
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

import structlog

from gazette_watch.core.http_client import HttpClient, PAGE_TIMEOUT
from gazette_watch.core.models import DocumentMetadata

logger = structlog.get_logger(__name__)

DEFAULT_TIMEZONE = "America/Fortaleza"
EDITION_DATE_FORMAT = "%d/%m/%Y"


@dataclass
class SourceConfig:
    """Configuration for a monitored gazette source."""

    source_id: str  # Display name, also the history and group key ("DOE/PB")
    collector: str = "listing"  # listing | fixed_url

    # Listing variant
    listing_url: Optional[str] = None
    link_pattern: Optional[str] = None  # Regex with day, month, year groups

    # Fixed-URL variant
    document_url: Optional[str] = None

    # Misc
    timeout: float = PAGE_TIMEOUT
    timezone: str = DEFAULT_TIMEZONE
    enabled: bool = True
    primary: bool = False

    @classmethod
    def from_dict(cls, data: dict, default_timezone: str = DEFAULT_TIMEZONE) -> "SourceConfig":
        """Create from dictionary (e.g., from YAML)."""
        return cls(
            source_id=data["source_id"],
            collector=data.get("collector", "listing"),
            listing_url=data.get("listing_url") or None,
            link_pattern=data.get("link_pattern") or None,
            document_url=data.get("document_url") or None,
            timeout=float(data.get("timeout", PAGE_TIMEOUT)),
            timezone=data.get("timezone") or default_timezone,
            enabled=data.get("enabled", True),
            primary=data.get("primary", False),
        )


def edition_from_url(url: str, link_pattern: Optional[str]) -> Optional[str]:
    """
    Derive the edition label from a date embedded in a document URL.

    Args:
        url: Document URL
        link_pattern: Regex whose first three groups are day, month, year

    Returns:
        "dd/mm/yyyy" or None if the URL does not match
    """
    if not url or not link_pattern:
        return None
    match = re.search(link_pattern, url, re.IGNORECASE)
    if not match or len(match.groups()) < 3:
        return None
    day, month, year = match.groups()[:3]
    return f"{day}/{month}/{year}"


def today_label(tz_name: str = DEFAULT_TIMEZONE) -> str:
    """Today's date in the source timezone, formatted as an edition label."""
    return datetime.now(ZoneInfo(tz_name)).strftime(EDITION_DATE_FORMAT)


class CollectorStrategy(ABC):
    """
    Abstract base class for collector strategies.

    One strategy per kind of source:
    - Listing: listing page -> first dated document link
    - Fixed URL: known document URL, edition from Last-Modified
    - Manual: explicit URL override
    """

    def __init__(self, http_client: Optional[HttpClient] = None):
        """
        Initialize collector.

        Args:
            http_client: Open HTTP client shared with the orchestrator
                (not needed by collectors that never touch the network)
        """
        self.http_client = http_client
        self.logger = logger.bind(collector=self.__class__.__name__)

    @abstractmethod
    async def collect(self, source: SourceConfig) -> DocumentMetadata:
        """
        Find the current edition of a source.

        Args:
            source: Source configuration

        Returns:
            DocumentMetadata for the edition

        Raises:
            CollectionError: If the edition cannot be determined
        """
        pass
