"""InitiativeRecord entity."""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class InitiativeRecord:
    """One row of the initiative catalog.

    Identified by its 1-based position in the catalog, not by any field.

    Examples:
        >>> record = InitiativeRecord(
        ...     company="Virgin Atlantic",
        ...     initiative="Sustainable Aviation Fuel",
        ...     challenge="Aviation emissions",
        ...     solution="Flying on 100% SAF",
        ...     call_to_action="Offset your flight",
        ...     links=("https://virginatlantic.com/saf",),
        ... )
        >>> record.primary_link
        'https://virginatlantic.com/saf'
    """

    company: str
    initiative: str
    challenge: str
    solution: str
    call_to_action: str
    links: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def primary_link(self) -> str:
        return self.links[0] if self.links else ""
