"""Browse catalog query - the public initiatives listing."""

from dataclasses import dataclass
from typing import Optional, Tuple

from virgin_initiatives.application.initiative.catalog_service import CatalogService
from virgin_initiatives.domain.initiative.core.entities.initiative import InitiativeRecord
from virgin_initiatives.domain.initiative.services.aggregation import (
    CompanyGroups,
    group_by_company,
)


@dataclass(frozen=True)
class BrowseResult:
    """
    Catalog listing.

    Attributes:
        initiatives: All catalog records in catalog order
        company_groups: Company -> initiative name -> occurrence count
        stale: True when served from a previous snapshot
        error: Fetch failure reason, None on success
    """

    initiatives: Tuple[InitiativeRecord, ...]
    company_groups: CompanyGroups
    stale: bool = False
    error: Optional[str] = None


class BrowseCatalogQuery:
    """Lists the catalog and looks up single initiatives. Never raises."""

    def __init__(self, catalog_service: CatalogService):
        self._catalog_service = catalog_service

    async def execute(self) -> BrowseResult:
        result = await self._catalog_service.load()
        return BrowseResult(
            initiatives=result.catalog.records,
            company_groups=group_by_company(result.catalog),
            stale=result.stale,
            error=result.error,
        )

    async def find_initiative(
        self, company: str, initiative_name: str
    ) -> Optional[InitiativeRecord]:
        """First initiative matching company and name exactly, or None.

        Example:
            >>> record = await query.find_initiative("Virgin Atlantic", "Tree Planting")
        """
        result = await self._catalog_service.load()
        return result.catalog.find(company, initiative_name)
