"""HTTP catalog source."""

import logging
from typing import Any, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from virgin_initiatives.domain.initiative.core.exceptions.initiative_errors import (
    CatalogUnavailableError,
)
from virgin_initiatives.domain.initiative.core.ports.catalog_source import ICatalogSource

logger = logging.getLogger(__name__)


class HttpCatalogSource(ICatalogSource):
    """
    Fetches the catalog text with a GET request.

    Transport errors are retried with exponential backoff; any non-2xx
    status, exhausted retries or undecodable body raise
    CatalogUnavailableError.

    Example:
        >>> async with HttpCatalogSource("https://cdn.example.com/initiatives.csv") as source:
        ...     text = await source.fetch_text()
    """

    def __init__(
        self,
        url: str,
        timeout_s: float = 10.0,
        retry_attempts: int = 3,
        retry_backoff_s: float = 0.5,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if retry_attempts < 1:
            raise ValueError("retry_attempts must be >= 1")
        self.url = url
        self.timeout_s = timeout_s
        self.retry_attempts = retry_attempts
        self.retry_backoff_s = retry_backoff_s
        self._client = client

    @property
    def location(self) -> str:
        return self.url

    async def __aenter__(self) -> "HttpCatalogSource":
        self._require_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_s))
        return self._client

    async def fetch_text(self) -> str:
        client = self._require_client()

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.retry_attempts),
                wait=wait_exponential(multiplier=self.retry_backoff_s, min=0, max=10),
                retry=retry_if_exception_type(httpx.TransportError),
                reraise=True,
            ):
                with attempt:
                    response = await client.get(self.url)
        except httpx.HTTPError as e:
            logger.error(
                "Catalog fetch failed",
                extra={"url": self.url, "error": str(e)},
            )
            raise CatalogUnavailableError(self.url, str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.warning(
                "Catalog fetch returned error status",
                extra={"url": self.url, "status": response.status_code},
            )
            raise CatalogUnavailableError(self.url, f"HTTP {response.status_code}")

        try:
            return response.content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise CatalogUnavailableError(self.url, f"not UTF-8: {e}") from e
