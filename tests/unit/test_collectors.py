"""Tests for collector strategies."""

from datetime import datetime
from zoneinfo import ZoneInfo

import httpx
import pytest

from gazette_watch.collectors import (
    FixedUrlCollector,
    ListingPageCollector,
    ManualCollector,
    SourceConfig,
)
from gazette_watch.collectors.base import edition_from_url
from gazette_watch.collectors.fixed_url import parse_last_modified
from gazette_watch.core.errors import CollectionError
from gazette_watch.core.http_client import HttpClient

LISTING_URL = "https://auniao.pb.gov.br/doe"
LINK_PATTERN = r"diario-oficial-(\d{2})-(\d{2})-(\d{4})-portal\.pdf"
DEJT_URL = "https://dejt.example.com/trt13/caderno.pdf"

LISTING_HTML = """
<html><body>
  <a href="/noticias">Notícias</a>
  <a href="/files/diario-oficial-05-03-2024-portal.pdf">DOE 05/03/2024</a>
  <a href="/files/diario-oficial-04-03-2024-portal.pdf">DOE 04/03/2024</a>
</body></html>
"""


@pytest.fixture
def doe_source():
    return SourceConfig(
        source_id="DOE/PB",
        collector="listing",
        listing_url=LISTING_URL,
        link_pattern=LINK_PATTERN,
    )


@pytest.fixture
def dejt_source():
    return SourceConfig(source_id="DEJT TRT-13", collector="fixed_url", document_url=DEJT_URL)


def _client(handler) -> HttpClient:
    return HttpClient(transport=httpx.MockTransport(handler))


class TestEditionFromUrl:
    """Tests for edition_from_url function."""

    def test_date_groups(self):
        url = "https://x/diario-oficial-05-03-2024-portal.pdf"
        assert edition_from_url(url, LINK_PATTERN) == "05/03/2024"

    def test_no_match(self):
        assert edition_from_url("https://x/other.pdf", LINK_PATTERN) is None

    def test_no_pattern(self):
        assert edition_from_url("https://x/a.pdf", None) is None


class TestListingPageCollector:
    """Tests for ListingPageCollector."""

    @pytest.mark.asyncio
    async def test_first_matching_link(self, doe_source):
        """Test the first matching link is resolved against the listing URL."""
        def handler(request):
            assert str(request.url) == LISTING_URL
            return httpx.Response(200, text=LISTING_HTML)

        async with _client(handler) as client:
            document = await ListingPageCollector(http_client=client).collect(doe_source)

        assert document.source == "DOE/PB"
        assert document.url == "https://auniao.pb.gov.br/files/diario-oficial-05-03-2024-portal.pdf"
        assert document.edition_label == "05/03/2024"
        assert document.dedup_key == document.url

    @pytest.mark.asyncio
    async def test_no_link(self, doe_source):
        def handler(request):
            return httpx.Response(200, text="<html><a href='/x.pdf'>x</a></html>")

        async with _client(handler) as client:
            with pytest.raises(CollectionError) as exc_info:
                await ListingPageCollector(http_client=client).collect(doe_source)

        assert exc_info.value.source == "DOE/PB"

    @pytest.mark.asyncio
    async def test_listing_unreachable(self, doe_source):
        def handler(request):
            return httpx.Response(500)

        async with _client(handler) as client:
            with pytest.raises(CollectionError):
                await ListingPageCollector(http_client=client).collect(doe_source)

    @pytest.mark.asyncio
    async def test_missing_configuration(self):
        source = SourceConfig(source_id="X", collector="listing")
        async with _client(lambda r: httpx.Response(200)) as client:
            with pytest.raises(CollectionError):
                await ListingPageCollector(http_client=client).collect(source)


class TestParseLastModified:
    """Tests for parse_last_modified function."""

    def test_http_date(self):
        parsed = parse_last_modified("Tue, 05 Mar 2024 12:00:00 GMT")
        assert parsed.isoformat() == "2024-03-05T12:00:00+00:00"

    def test_invalid(self):
        assert parse_last_modified("not a date") is None
        assert parse_last_modified(None) is None


class TestFixedUrlCollector:
    """Tests for FixedUrlCollector."""

    @pytest.mark.asyncio
    async def test_last_modified(self, dejt_source):
        """Test edition and key come from Last-Modified."""
        def handler(request):
            assert request.method == "HEAD"
            return httpx.Response(200, headers={"Last-Modified": "Tue, 05 Mar 2024 12:00:00 GMT"})

        async with _client(handler) as client:
            document = await FixedUrlCollector(http_client=client).collect(dejt_source)

        assert document.url == DEJT_URL
        assert document.edition_label == "05/03/2024"
        assert document.dedup_key == f"{DEJT_URL}#2024-03-05T12:00:00+00:00"

    @pytest.mark.asyncio
    async def test_edition_in_source_timezone(self, dejt_source):
        """Test a late UTC timestamp falls on the previous local day."""
        def handler(request):
            return httpx.Response(200, headers={"Last-Modified": "Wed, 06 Mar 2024 01:30:00 GMT"})

        async with _client(handler) as client:
            document = await FixedUrlCollector(http_client=client).collect(dejt_source)

        assert document.edition_label == "05/03/2024"

    @pytest.mark.asyncio
    async def test_missing_header_falls_back(self, dejt_source):
        def handler(request):
            return httpx.Response(200)

        async with _client(handler) as client:
            document = await FixedUrlCollector(http_client=client).collect(dejt_source)

        today = datetime.now(ZoneInfo(dejt_source.timezone)).strftime("%d/%m/%Y")
        assert document.dedup_key == f"{DEJT_URL}#edition"
        assert document.edition_label == today

    @pytest.mark.asyncio
    async def test_head_failure_falls_back(self, dejt_source):
        """Test a failed HEAD is not a collection error."""
        def handler(request):
            return httpx.Response(404)

        async with _client(handler) as client:
            document = await FixedUrlCollector(http_client=client).collect(dejt_source)

        assert document.dedup_key == f"{DEJT_URL}#edition"

    @pytest.mark.asyncio
    async def test_missing_url(self):
        source = SourceConfig(source_id="DEJT TRT-13", collector="fixed_url")
        async with _client(lambda r: httpx.Response(200)) as client:
            with pytest.raises(CollectionError):
                await FixedUrlCollector(http_client=client).collect(source)


class TestManualCollector:
    """Tests for ManualCollector."""

    @pytest.mark.asyncio
    async def test_label_from_pattern(self, doe_source):
        url = "https://x/diario-oficial-01-02-2024-portal.pdf"
        document = await ManualCollector(url).collect(doe_source)
        assert document.edition_label == "01/02/2024"
        assert document.dedup_key == url

    @pytest.mark.asyncio
    async def test_label_fallback(self, dejt_source):
        document = await ManualCollector("file:///tmp/doe.pdf").collect(dejt_source)
        assert document.edition_label == "manual"
        assert document.url == "file:///tmp/doe.pdf"
