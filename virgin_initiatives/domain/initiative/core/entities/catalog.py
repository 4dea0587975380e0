"""InitiativeCatalog snapshot."""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple

from virgin_initiatives.domain.initiative.core.entities.initiative import InitiativeRecord
from virgin_initiatives.domain.initiative.core.exceptions.initiative_errors import (
    BrokenJoinError,
)


@dataclass(frozen=True)
class SkippedRow:
    """A catalog record dropped by the parser.

    Attributes:
        line_number: Physical line where the record ended (1-based)
        field_count: Number of fields recovered
        raw: Fields joined back with commas, for diagnosis
    """

    line_number: int
    field_count: int
    raw: str


@dataclass(frozen=True)
class InitiativeCatalog:
    """Immutable, ordered snapshot of the initiative catalog.

    The 1-based position of a record is its id. Participation records
    join against it through get().

    Examples:
        >>> catalog = InitiativeCatalog(records=(record_a, record_b))
        >>> catalog.get(2) is record_b
        True
        >>> catalog.get(3)
        Traceback (most recent call last):
        ...
        BrokenJoinError: Initiative 3 not in catalog of 2 initiatives
    """

    records: Tuple[InitiativeRecord, ...] = field(default_factory=tuple)
    skipped_rows: Tuple[SkippedRow, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "InitiativeCatalog":
        return cls()

    def get(self, initiative_id: int) -> InitiativeRecord:
        """Positional lookup by 1-based id.

        Raises:
            BrokenJoinError: If initiative_id - 1 is outside the catalog
        """
        if (
            isinstance(initiative_id, bool)
            or not isinstance(initiative_id, int)
            or not 1 <= initiative_id <= len(self.records)
        ):
            raise BrokenJoinError(initiative_id, len(self.records))
        return self.records[initiative_id - 1]

    def find(self, company: str, initiative_name: str) -> Optional[InitiativeRecord]:
        """First record with this exact company and initiative name."""
        for record in self.records:
            if record.company == company and record.initiative == initiative_name:
                return record
        return None

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_rows)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[InitiativeRecord]:
        return iter(self.records)
