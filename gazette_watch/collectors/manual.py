"""
Manual collector: explicit document URL given by the caller.

No network access. The edition label comes from the source's filename
pattern when it matches, "manual" otherwise.
"""

from gazette_watch.core.models import DocumentMetadata

from .base import CollectorStrategy, SourceConfig, edition_from_url


class ManualCollector(CollectorStrategy):
    """Wraps a URL override so manual runs follow the same pipeline."""

    def __init__(self, url: str, **kwargs):
        super().__init__(**kwargs)
        self.url = url

    async def collect(self, source: SourceConfig) -> DocumentMetadata:
        edition = edition_from_url(self.url, source.link_pattern) or "manual"
        self.logger.info("manual_edition", source=source.source_id, url=self.url)
        return DocumentMetadata(
            source=source.source_id,
            url=self.url,
            edition_label=edition,
            dedup_key=self.url,
        )
