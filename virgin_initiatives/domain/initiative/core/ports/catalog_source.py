"""Catalog source port (interface)."""

from abc import ABC, abstractmethod


class ICatalogSource(ABC):
    """Provider of the raw delimited-text initiative catalog.

    Implementations return the full text and raise CatalogUnavailableError
    on any I/O, HTTP or decoding failure.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Path or URL, for logging and error messages."""
        pass

    @abstractmethod
    async def fetch_text(self) -> str:
        """Return the catalog text.

        Raises:
            CatalogUnavailableError: If the catalog cannot be read
        """
        pass
