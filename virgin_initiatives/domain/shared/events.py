"""Domain event base.

An event records something that already happened to an aggregate (a
signup, a sign-in, a profile change). Aggregates buffer them and the
caller that drove the change publishes them on the event bus.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID, uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """Immutable fact with an identity and a UTC timestamp.

    Concrete events list their payload fields first; ``event_id`` and
    ``occurred_at`` are keyword-only so they can be left to their defaults.

    Examples:
        >>> event = UserCreated(user_id=7, email="jane@virgin.com")
        >>> event.event_name
        'UserCreated'
        >>> sorted(event.log_context())
        ['event_id', 'event_type', 'occurred_at']

    Raises:
        ValueError: If occurred_at is naive
    """

    event_id: UUID = field(default_factory=uuid4, kw_only=True)
    occurred_at: datetime = field(default_factory=_utcnow, kw_only=True)

    def __post_init__(self) -> None:
        if self.occurred_at.tzinfo is None:
            raise ValueError("occurred_at must be timezone-aware (use UTC)")

    @property
    def event_name(self) -> str:
        return type(self).__name__

    def log_context(self) -> Dict[str, Any]:
        """Fields identifying this event in log records."""
        return {
            "event_type": self.event_name,
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
        }
