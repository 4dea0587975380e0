"""Get my initiatives query - the per-user impact view."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from virgin_initiatives.application.initiative.catalog_service import CatalogService
from virgin_initiatives.domain.initiative.services.aggregation import (
    AggregationPipeline,
    ImpactSummary,
)
from virgin_initiatives.domain.user.core.exceptions.user_errors import (
    UserStoreUnavailableError,
)
from virgin_initiatives.domain.user.core.ports.user_store import IUserStore
from virgin_initiatives.domain.user.core.value_objects.email import Email

logger = logging.getLogger(__name__)


class MyInitiativesStatus(str, Enum):
    OK = "ok"
    USER_NOT_FOUND = "user_not_found"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class MyInitiativesResult:
    """
    Impact view for one user.

    Attributes:
        status: OK, USER_NOT_FOUND or UNAVAILABLE
        summary: Aggregated view, only set when status is OK
        catalog_stale: True when joined against a previous catalog snapshot
        error: Failure reason for UNAVAILABLE, or the catalog error when stale
    """

    status: MyInitiativesStatus
    summary: Optional[ImpactSummary] = None
    catalog_stale: bool = False
    error: Optional[str] = None


class GetMyInitiativesQuery:
    """
    Joins a user's participations against the catalog. Never raises.

    Participations whose id is outside the catalog are dropped and
    reported on summary.broken_joins.

    Example:
        >>> query = GetMyInitiativesQuery(store, catalog_service)
        >>> result = await query.execute("jane@virgin.com")
        >>> result.summary.category_points.as_dict()
        {'environmental': 35, 'social': 40, 'innovation': 25}
    """

    def __init__(
        self,
        user_store: IUserStore,
        catalog_service: CatalogService,
        timeout_s: float = 10.0,
    ):
        self._user_store = user_store
        self._catalog_service = catalog_service
        self._timeout_s = timeout_s
        self._pipeline = AggregationPipeline(on_broken_join="drop")

    async def execute(self, email: str) -> MyInitiativesResult:
        try:
            address = Email(email)
        except ValueError as e:
            return MyInitiativesResult(MyInitiativesStatus.USER_NOT_FOUND, error=str(e))

        try:
            user = await asyncio.wait_for(
                self._user_store.find_by_email(address), timeout=self._timeout_s
            )
        except asyncio.TimeoutError:
            return self._unavailable(f"user lookup timed out after {self._timeout_s}s")
        except UserStoreUnavailableError as e:
            return self._unavailable(str(e))

        if user is None:
            return MyInitiativesResult(MyInitiativesStatus.USER_NOT_FOUND)

        loaded = await self._catalog_service.load()
        if not loaded.ok and not loaded.stale:
            return self._unavailable(loaded.error or "catalog unavailable")

        summary = self._pipeline.summarize(user, loaded.catalog)
        return MyInitiativesResult(
            status=MyInitiativesStatus.OK,
            summary=summary,
            catalog_stale=loaded.stale,
            error=loaded.error,
        )

    @staticmethod
    def _unavailable(reason: str) -> MyInitiativesResult:
        logger.warning("My initiatives unavailable", extra={"reason": reason})
        return MyInitiativesResult(MyInitiativesStatus.UNAVAILABLE, error=reason)
