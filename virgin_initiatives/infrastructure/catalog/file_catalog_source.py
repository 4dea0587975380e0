"""File catalog source."""

import logging
from pathlib import Path
from typing import Union

from virgin_initiatives.domain.initiative.core.exceptions.initiative_errors import (
    CatalogUnavailableError,
)
from virgin_initiatives.domain.initiative.core.ports.catalog_source import ICatalogSource

logger = logging.getLogger(__name__)


class FileCatalogSource(ICatalogSource):
    """Reads the catalog from a UTF-8 file on disk.

    Example:
        >>> source = FileCatalogSource("data/sample_initiatives.csv")
        >>> text = await source.fetch_text()
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    @property
    def location(self) -> str:
        return str(self.path)

    async def fetch_text(self) -> str:
        try:
            # utf-8-sig drops a leading BOM written by spreadsheet exports
            return self.path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(
                "Error reading catalog file",
                extra={"path": self.location, "error": str(e)},
            )
            raise CatalogUnavailableError(self.location, str(e)) from e
