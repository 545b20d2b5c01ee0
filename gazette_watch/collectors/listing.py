"""
Listing-page collector: listing -> first dated document link.

The listing page is fetched and parsed; the first hyperlink whose target
matches the source's filename pattern is the current edition. The resolved
URL doubles as the dedup key.
"""

import re
from typing import Optional
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from gazette_watch.core.errors import CollectionError
from gazette_watch.core.models import DocumentMetadata

from .base import CollectorStrategy, SourceConfig, edition_from_url


class ListingPageCollector(CollectorStrategy):
    """Collector for sources that publish a listing page of dated PDFs."""

    async def collect(self, source: SourceConfig) -> DocumentMetadata:
        if not self.http_client:
            raise RuntimeError("Collector has no HTTP client")
        if not source.listing_url or not source.link_pattern:
            raise CollectionError(
                "listing_url and link_pattern are required", source=source.source_id
            )

        self.logger.info("fetching_listing", source=source.source_id, url=source.listing_url)

        try:
            html = await self.http_client.get_text(source.listing_url, timeout=source.timeout)
        except httpx.HTTPError as e:
            raise CollectionError(
                f"Failed to open listing page: {e}", source=source.source_id
            ) from e

        url = self.find_document_link(html, source)
        if not url:
            raise CollectionError(
                "No document link found on listing page", source=source.source_id
            )

        edition = edition_from_url(url, source.link_pattern)
        self.logger.info("edition_found", source=source.source_id, url=url, edition=edition)

        return DocumentMetadata(
            source=source.source_id,
            url=url,
            edition_label=edition or "",
            dedup_key=url,
        )

    def find_document_link(self, html: str, source: SourceConfig) -> Optional[str]:
        """
        Return the absolute URL of the first link matching the pattern.

        Args:
            html: Listing page HTML
            source: Source configuration

        Returns:
            Absolute URL or None
        """
        pattern = re.compile(source.link_pattern, re.IGNORECASE)
        soup = BeautifulSoup(html, "lxml")

        for link in soup.find_all("a", href=True):
            href = link["href"].strip()
            if pattern.search(href):
                return urljoin(source.listing_url, href)

        return None
