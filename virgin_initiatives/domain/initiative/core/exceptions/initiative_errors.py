"""Initiative domain exceptions."""


class InitiativeDomainError(Exception):
    """Base exception for Initiative domain errors."""

    pass


class BrokenJoinError(InitiativeDomainError):
    """A participation record points outside the current catalog.

    The catalog is keyed by row position, so this signals a reordered or
    truncated catalog that no longer matches stored participation records.
    """

    def __init__(self, initiative_id: int, catalog_size: int):
        """Initialize with the dangling id.

        Args:
            initiative_id: 1-based id from the participation record
            catalog_size: Number of records in the catalog snapshot
        """
        self.initiative_id = initiative_id
        self.catalog_size = catalog_size
        super().__init__(
            f"Initiative {initiative_id} not in catalog of {catalog_size} initiatives"
        )


class CatalogUnavailableError(InitiativeDomainError):
    """Catalog text could not be fetched or decoded."""

    def __init__(self, source: str, reason: str):
        """Initialize with failure details.

        Args:
            source: Path or URL of the catalog
            reason: Human-readable reason
        """
        self.source = source
        self.reason = reason
        super().__init__(f"Catalog unavailable from {source}: {reason}")
