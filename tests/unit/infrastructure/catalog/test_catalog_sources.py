"""Unit tests for the file and HTTP catalog sources."""

import httpx
import pytest

from virgin_initiatives.domain.initiative.core.exceptions.initiative_errors import (
    CatalogUnavailableError,
)
from virgin_initiatives.infrastructure.catalog.file_catalog_source import FileCatalogSource
from virgin_initiatives.infrastructure.catalog.http_catalog_source import HttpCatalogSource

CATALOG_URL = "https://cdn.test/initiatives.csv"


def make_source(handler, retry_attempts: int = 1) -> HttpCatalogSource:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpCatalogSource(
        CATALOG_URL, retry_attempts=retry_attempts, retry_backoff_s=0, client=client
    )


class TestFileCatalogSource:
    @pytest.mark.asyncio
    async def test_reads_text(self, tmp_path, catalog_text):
        path = tmp_path / "catalog.csv"
        path.write_text(catalog_text, encoding="utf-8")

        source = FileCatalogSource(path)

        assert await source.fetch_text() == catalog_text
        assert source.location == str(path)

    @pytest.mark.asyncio
    async def test_strips_byte_order_mark(self, tmp_path):
        path = tmp_path / "catalog.csv"
        path.write_bytes(b"\xef\xbb\xbfCompany,Initiative\n")

        text = await FileCatalogSource(str(path)).fetch_text()

        assert text == "Company,Initiative\n"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        source = FileCatalogSource(tmp_path / "missing.csv")

        with pytest.raises(CatalogUnavailableError) as exc_info:
            await source.fetch_text()

        assert exc_info.value.source == source.location

    @pytest.mark.asyncio
    async def test_non_utf8_file(self, tmp_path):
        path = tmp_path / "catalog.csv"
        path.write_bytes(b"Company\n\xff\xfe\xfa\n")

        with pytest.raises(CatalogUnavailableError):
            await FileCatalogSource(path).fetch_text()


class TestHttpCatalogSource:
    @pytest.mark.asyncio
    async def test_fetches_text(self, catalog_text):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, content=catalog_text.encode("utf-8"))

        source = make_source(handler)

        assert await source.fetch_text() == catalog_text
        assert seen == [CATALOG_URL]
        assert source.location == CATALOG_URL

    @pytest.mark.asyncio
    async def test_strips_byte_order_mark(self):
        source = make_source(lambda r: httpx.Response(200, content=b"\xef\xbb\xbfCompany\n"))

        assert await source.fetch_text() == "Company\n"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [404, 500, 503])
    async def test_error_status(self, status):
        source = make_source(lambda r: httpx.Response(status))

        with pytest.raises(CatalogUnavailableError, match=f"HTTP {status}"):
            await source.fetch_text()

    @pytest.mark.asyncio
    async def test_transport_errors_are_retried(self, catalog_text):
        calls = []

        def flaky(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) < 3:
                raise httpx.ConnectError("connection reset", request=request)
            return httpx.Response(200, content=catalog_text.encode("utf-8"))

        source = make_source(flaky, retry_attempts=3)

        assert await source.fetch_text() == catalog_text
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_exhausted_retries(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        source = make_source(refuse, retry_attempts=2)

        with pytest.raises(CatalogUnavailableError, match="connection refused"):
            await source.fetch_text()

    @pytest.mark.asyncio
    async def test_non_utf8_body(self):
        source = make_source(lambda r: httpx.Response(200, content=b"\xff\xfe\xfa"))

        with pytest.raises(CatalogUnavailableError, match="not UTF-8"):
            await source.fetch_text()

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self):
        source = make_source(lambda r: httpx.Response(200, content=b""))

        async with source:
            await source.fetch_text()

        assert source._client is None

    def test_retry_attempts_validated(self):
        with pytest.raises(ValueError):
            HttpCatalogSource(CATALOG_URL, retry_attempts=0)
