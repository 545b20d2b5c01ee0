"""
Fixed-URL collector: known document URL, edition from Last-Modified.

Only a HEAD request is issued. A failed or incomplete timestamp lookup is
not an error: the edition falls back to today's date and the dedup key to
"<url>#edition".
"""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional
from zoneinfo import ZoneInfo

import httpx

from gazette_watch.core.errors import CollectionError
from gazette_watch.core.models import DocumentMetadata

from .base import EDITION_DATE_FORMAT, CollectorStrategy, SourceConfig, today_label


def parse_last_modified(value: Optional[str]) -> Optional[datetime]:
    """Parse an HTTP date header, returning None when absent or invalid."""
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class FixedUrlCollector(CollectorStrategy):
    """Collector for sources served from one stable URL."""

    async def collect(self, source: SourceConfig) -> DocumentMetadata:
        if not self.http_client:
            raise RuntimeError("Collector has no HTTP client")
        if not source.document_url:
            raise CollectionError("document_url is not configured", source=source.source_id)

        url = source.document_url
        modified = await self._last_modified(url, source)

        if modified is None:
            self.logger.info("edition_fallback", source=source.source_id, url=url)
            return DocumentMetadata(
                source=source.source_id,
                url=url,
                edition_label=today_label(source.timezone),
                dedup_key=f"{url}#edition",
            )

        local = modified.astimezone(ZoneInfo(source.timezone))
        edition = local.strftime(EDITION_DATE_FORMAT)
        self.logger.info("edition_found", source=source.source_id, url=url, edition=edition)

        return DocumentMetadata(
            source=source.source_id,
            url=url,
            edition_label=edition,
            dedup_key=f"{url}#{modified.isoformat()}",
        )

    async def _last_modified(self, url: str, source: SourceConfig) -> Optional[datetime]:
        try:
            response = await self.http_client.head(url, timeout=source.timeout)
        except httpx.HTTPError as e:
            self.logger.warning("head_request_failed", source=source.source_id, error=str(e))
            return None
        return parse_last_modified(response.headers.get("last-modified"))
