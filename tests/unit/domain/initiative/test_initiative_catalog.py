"""Unit tests for InitiativeCatalog."""

import pytest

from virgin_initiatives.domain.initiative.core.entities.catalog import InitiativeCatalog
from virgin_initiatives.domain.initiative.core.exceptions.initiative_errors import (
    BrokenJoinError,
    CatalogUnavailableError,
    InitiativeDomainError,
)


class TestCatalogGet:
    def test_positional_lookup(self, catalog):
        assert catalog.get(1) is catalog.records[0]
        assert catalog.get(4) is catalog.records[3]

    @pytest.mark.parametrize("initiative_id", [0, -1, 5, True, "1"])
    def test_out_of_range_raises(self, catalog, initiative_id):
        with pytest.raises(BrokenJoinError):
            catalog.get(initiative_id)


class TestCatalogFind:
    def test_first_match_wins(self, catalog):
        record = catalog.find("Acme", "Tree Planting")

        assert record is catalog.records[0]

    def test_match_is_exact(self, catalog):
        assert catalog.find("acme", "Tree Planting") is None
        assert catalog.find("Acme", "Tree planting") is None

    def test_missing(self, catalog):
        assert catalog.find("Initech", "Anything") is None


class TestCatalogBasics:
    def test_empty(self):
        catalog = InitiativeCatalog.empty()

        assert len(catalog) == 0
        assert list(catalog) == []
        assert catalog.skipped_count == 0

    def test_iteration_in_catalog_order(self, catalog):
        assert [r.initiative for r in catalog] == [
            "Tree Planting",
            "Beach Cleanup",
            "Solar Roofs",
            "Tree Planting",
        ]


def test_errors_share_base():
    assert isinstance(BrokenJoinError(1, 0), InitiativeDomainError)
    error = CatalogUnavailableError("data/x.csv", "missing")
    assert isinstance(error, InitiativeDomainError)
    assert error.source == "data/x.csv"
    assert error.reason == "missing"
