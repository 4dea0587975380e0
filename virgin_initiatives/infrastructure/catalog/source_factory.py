"""Catalog source factory.

- "file": FileCatalogSource over CATALOG_PATH (default)
- "http": HttpCatalogSource over CATALOG_URL
"""

from typing import Optional

from virgin_initiatives.config import Settings, get_settings
from virgin_initiatives.domain.initiative.core.ports.catalog_source import ICatalogSource
from virgin_initiatives.infrastructure.catalog.file_catalog_source import FileCatalogSource
from virgin_initiatives.infrastructure.catalog.http_catalog_source import HttpCatalogSource


def create_catalog_source(settings: Optional[Settings] = None) -> ICatalogSource:
    """Create the catalog source selected by CATALOG_SOURCE."""
    settings = settings or get_settings()

    if settings.catalog_source == "http":
        return HttpCatalogSource(settings.catalog_url, timeout_s=settings.fetch_timeout_s)

    return FileCatalogSource(settings.catalog_path)
