"""
Async HTTP client for listing pages, edition metadata and documents.

Built on httpx with:
- Per-call timeouts (short for pages and metadata, longer for documents)
- Non-2xx responses raised as errors
- file:// URLs served from disk for local testing
"""

from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import httpx
import structlog

logger = structlog.get_logger(__name__)


USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

PAGE_TIMEOUT = 20.0
DOCUMENT_TIMEOUT = 60.0


class HttpClient:
    """
    Async HTTP client wrapper.

    Usage:
        async with HttpClient() as client:
            html = await client.get_text("https://example.com")
    """

    def __init__(
        self,
        page_timeout: float = PAGE_TIMEOUT,
        document_timeout: float = DOCUMENT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            page_timeout: Timeout for listing pages and HEAD requests
            document_timeout: Timeout for full document downloads
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.page_timeout = page_timeout
        self.document_timeout = document_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HttpClient":
        """Enter async context."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.page_timeout),
            follow_redirects=True,
            headers={
                "User-Agent": USER_AGENT,
                "Accept-Language": "pt-BR,pt;q=0.9,en;q=0.8",
            },
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        url: str,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'async with' context.")

        response = await self._client.request(
            method,
            url,
            timeout=httpx.Timeout(timeout or self.page_timeout),
        )
        response.raise_for_status()
        return response

    async def get(self, url: str, timeout: Optional[float] = None) -> httpx.Response:
        """GET request; raises httpx.HTTPStatusError on non-2xx."""
        logger.debug("http_get", url=url)
        return await self._request("GET", url, timeout)

    async def head(self, url: str, timeout: Optional[float] = None) -> httpx.Response:
        """HEAD request (metadata only, no body download)."""
        logger.debug("http_head", url=url)
        return await self._request("HEAD", url, timeout)

    async def get_text(self, url: str, **kwargs) -> str:
        """GET request returning text content."""
        response = await self.get(url, **kwargs)
        return response.text

    async def get_bytes(self, url: str, **kwargs) -> bytes:
        """GET request returning bytes content."""
        response = await self.get(url, **kwargs)
        return response.content

    async def download(self, url: str) -> bytes:
        """
        Download a document body.

        Args:
            url: http(s) URL, or file:// URL of a local document

        Returns:
            Raw document bytes
        """
        parsed = urlparse(url)
        if parsed.scheme == "file":
            path = Path(unquote(parsed.path))
            logger.info("reading_local_document", path=str(path))
            return path.read_bytes()

        logger.info("downloading", url=url)
        data = await self.get_bytes(url, timeout=self.document_timeout)
        logger.info("download_complete", url=url, size=len(data))
        return data
