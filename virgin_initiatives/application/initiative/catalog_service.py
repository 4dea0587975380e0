"""Catalog loading with a last-good fallback."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from virgin_initiatives.domain.initiative.core.entities.catalog import InitiativeCatalog
from virgin_initiatives.domain.initiative.core.exceptions.initiative_errors import (
    CatalogUnavailableError,
)
from virgin_initiatives.domain.initiative.core.ports.catalog_source import ICatalogSource
from virgin_initiatives.domain.initiative.parsing.catalog_parser import parse_catalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogLoadResult:
    """
    Outcome of a catalog load.

    Attributes:
        catalog: Fresh catalog, last good snapshot, or empty catalog
        stale: True when catalog is a previous snapshot served after a failure
        error: Why the fetch failed, None on success
    """

    catalog: InitiativeCatalog
    stale: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CatalogService:
    """
    Fetches and parses the catalog, remembering the last good snapshot.

    load() never raises: a failed fetch serves the last good snapshot
    (stale) or, before the first success, an empty catalog.

    Example:
        >>> service = CatalogService(FileCatalogSource("data/sample_initiatives.csv"))
        >>> result = await service.load()
        >>> len(result.catalog)
        12
    """

    def __init__(self, source: ICatalogSource, timeout_s: float = 10.0):
        """
        Initialize service.

        Args:
            source: Catalog source port
            timeout_s: Upper bound on one fetch
        """
        if timeout_s <= 0:
            raise ValueError("timeout_s must be positive")
        self._source = source
        self._timeout_s = timeout_s
        self._last_good: Optional[InitiativeCatalog] = None

    @property
    def last_good(self) -> Optional[InitiativeCatalog]:
        return self._last_good

    async def load(self) -> CatalogLoadResult:
        try:
            text = await asyncio.wait_for(self._source.fetch_text(), timeout=self._timeout_s)
        except asyncio.TimeoutError:
            return self._fallback(f"timed out after {self._timeout_s}s")
        except CatalogUnavailableError as e:
            return self._fallback(e.reason)

        catalog = parse_catalog(text)
        self._last_good = catalog
        return CatalogLoadResult(catalog=catalog)

    def _fallback(self, reason: str) -> CatalogLoadResult:
        stale = self._last_good is not None
        logger.warning(
            "Catalog unavailable",
            extra={
                "source": self._source.location,
                "reason": reason,
                "serving_stale": stale,
            },
        )
        catalog = self._last_good if self._last_good is not None else InitiativeCatalog.empty()
        return CatalogLoadResult(catalog=catalog, stale=stale, error=reason)
