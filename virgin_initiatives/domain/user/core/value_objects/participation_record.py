"""ParticipationRecord value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ParticipationRecord:
    """Evidence that a user engaged with one catalog initiative.

    ``initiative_id`` is the 1-based row position of the initiative in the
    catalog. Records are immutable once created.

    Examples:
        >>> record = ParticipationRecord(
        ...     initiative_id=3,
        ...     date_participated="2024-03-15",
        ...     points_earned=150,
        ...     contribution="Planted 10 trees",
        ... )
        >>> record.catalog_index
        2
    """

    initiative_id: int
    date_participated: str
    points_earned: int
    contribution: str = ""

    def __post_init__(self) -> None:
        """Validate record invariants."""
        if isinstance(self.initiative_id, bool) or not isinstance(self.initiative_id, int):
            raise ValueError(f"initiative_id must be an integer: {self.initiative_id!r}")
        if self.initiative_id < 1:
            raise ValueError(f"initiative_id must be >= 1, got {self.initiative_id}")
        if isinstance(self.points_earned, bool) or not isinstance(self.points_earned, int):
            raise ValueError(f"points_earned must be an integer: {self.points_earned!r}")
        if self.points_earned < 0:
            raise ValueError(f"points_earned cannot be negative: {self.points_earned}")

    @property
    def catalog_index(self) -> int:
        """0-based offset into the catalog."""
        return self.initiative_id - 1
