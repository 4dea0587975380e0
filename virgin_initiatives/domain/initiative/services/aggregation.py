"""Aggregation pipeline.

Joins a user's participation records against a catalog snapshot and derives
the view model shown on the impact pages:

- my_initiatives: one entry per participation, in record order
- category_points: the user's total split into three weighted buckets
- company_groups: the whole catalog grouped by company with duplicate counts
"""

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Literal, Tuple

from virgin_initiatives.domain.initiative.core.entities.catalog import InitiativeCatalog
from virgin_initiatives.domain.initiative.core.entities.initiative import InitiativeRecord
from virgin_initiatives.domain.initiative.core.exceptions.initiative_errors import (
    BrokenJoinError,
)
from virgin_initiatives.domain.user.core.entities.user import User
from virgin_initiatives.domain.user.core.value_objects.participation_record import (
    ParticipationRecord,
)

logger = logging.getLogger(__name__)

# Display-only split of a user's total points
CATEGORY_WEIGHTS: Dict[str, Decimal] = {
    "environmental": Decimal("0.35"),
    "social": Decimal("0.40"),
    "innovation": Decimal("0.25"),
}

BrokenJoinPolicy = Literal["raise", "drop"]

CompanyGroups = Dict[str, Dict[str, int]]


@dataclass(frozen=True)
class MyInitiativeEntry:
    """A participation joined with its catalog record."""

    initiative_details: InitiativeRecord
    date_participated: str
    points_earned: int
    contribution: str


@dataclass(frozen=True)
class CategoryPoints:
    """Total points split into the three category buckets.

    Buckets are rounded independently, so total may differ from the
    user's points by one.
    """

    environmental: int
    social: int
    innovation: int

    @property
    def total(self) -> int:
        return self.environmental + self.social + self.innovation

    def as_dict(self) -> Dict[str, int]:
        return {
            "environmental": self.environmental,
            "social": self.social,
            "innovation": self.innovation,
        }


@dataclass(frozen=True)
class ImpactSummary:
    """Everything the impact pages need for one user."""

    my_initiatives: Tuple[MyInitiativeEntry, ...]
    category_points: CategoryPoints
    company_groups: CompanyGroups
    total_points: int
    broken_joins: Tuple[BrokenJoinError, ...] = field(default_factory=tuple)


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero.

    Examples:
        >>> round_half_up(Decimal("2.5"))
        3
        >>> round_half_up(Decimal("3.49"))
        3
    """
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_category_points(points: int) -> CategoryPoints:
    """Split points with CATEGORY_WEIGHTS.

    Examples:
        >>> compute_category_points(100).as_dict()
        {'environmental': 35, 'social': 40, 'innovation': 25}
        >>> compute_category_points(10).as_dict()
        {'environmental': 4, 'social': 4, 'innovation': 3}

    Raises:
        ValueError: If points is negative
    """
    if isinstance(points, bool) or not isinstance(points, int):
        raise ValueError(f"points must be an integer: {points!r}")
    if points < 0:
        raise ValueError(f"points cannot be negative: {points}")

    total = Decimal(points)
    buckets = {name: round_half_up(total * weight) for name, weight in CATEGORY_WEIGHTS.items()}
    return CategoryPoints(**buckets)


def join_participations(
    records: Iterable[ParticipationRecord],
    catalog: InitiativeCatalog,
) -> List[MyInitiativeEntry]:
    """Join participation records to catalog rows, keeping record order.

    Raises:
        BrokenJoinError: On the first record whose id is outside the catalog
    """
    return [_join_one(record, catalog) for record in records]


def _join_one(record: ParticipationRecord, catalog: InitiativeCatalog) -> MyInitiativeEntry:
    return MyInitiativeEntry(
        initiative_details=catalog.get(record.initiative_id),
        date_participated=record.date_participated,
        points_earned=record.points_earned,
        contribution=record.contribution,
    )


def group_by_company(records: Iterable[InitiativeRecord]) -> CompanyGroups:
    """Group catalog rows by company, counting duplicate initiative names.

    Keys are exact strings; insertion order follows the catalog.

    Examples:
        >>> group_by_company([acme_trees, acme_trees, acme_beach])
        {'Acme': {'Tree Planting': 2, 'Beach Cleanup': 1}}
    """
    groups: CompanyGroups = {}
    for record in records:
        names = groups.setdefault(record.company, {})
        names[record.initiative] = names.get(record.initiative, 0) + 1
    return groups


class AggregationPipeline:
    """Builds an ImpactSummary from a user and a catalog snapshot.

    Args:
        on_broken_join: "raise" propagates BrokenJoinError (default);
            "drop" omits the entry and reports it on the summary

    Examples:
        >>> pipeline = AggregationPipeline(on_broken_join="drop")
        >>> summary = pipeline.summarize(user, catalog)
        >>> summary.category_points.as_dict()
        {'environmental': 35, 'social': 40, 'innovation': 25}
    """

    def __init__(self, on_broken_join: BrokenJoinPolicy = "raise") -> None:
        if on_broken_join not in ("raise", "drop"):
            raise ValueError(f"Unknown broken join policy: {on_broken_join}")
        self.on_broken_join = on_broken_join

    def summarize(self, user: User, catalog: InitiativeCatalog) -> ImpactSummary:
        """Compute the full impact summary for user.

        Raises:
            BrokenJoinError: With the "raise" policy, on a dangling initiative id
        """
        entries: List[MyInitiativeEntry] = []
        broken: List[BrokenJoinError] = []

        for record in user.participated_initiatives:
            try:
                entries.append(_join_one(record, catalog))
            except BrokenJoinError as e:
                if self.on_broken_join == "raise":
                    raise
                logger.warning(
                    "Dropping participation with broken catalog join",
                    extra={
                        "user_id": user.id,
                        "initiative_id": e.initiative_id,
                        "catalog_size": e.catalog_size,
                    },
                )
                broken.append(e)

        return ImpactSummary(
            my_initiatives=tuple(entries),
            category_points=compute_category_points(user.points),
            company_groups=group_by_company(catalog),
            total_points=user.points,
            broken_joins=tuple(broken),
        )
