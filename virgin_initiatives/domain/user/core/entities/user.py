"""User entity - aggregate root."""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from virgin_initiatives.domain.user.core.value_objects.email import Email
from virgin_initiatives.domain.user.core.value_objects.participation_record import (
    ParticipationRecord,
)
from virgin_initiatives.domain.user.core.value_objects.password_hash import PasswordHash
from virgin_initiatives.domain.user.core.value_objects.profile_patch import ProfilePatch


@dataclass
class User:
    """User aggregate root.

    Represents a registered participant. Primary lookup key is the email,
    primary identity is the store-assigned integer id.

    Invariants:
    - id is a positive integer and immutable
    - email is unique (enforced by the store) and immutable
    - points is never negative
    - participated_initiatives keeps insertion order

    Examples:
        >>> user = User.create(1, Email("jane@virgin.com"), "s3cret")
        >>> user.points
        0
        >>> user.verify_password("s3cret")
        True

        >>> user.apply_profile_patch(ProfilePatch(first_name="Jane"))
        >>> user.first_name
        'Jane'
    """

    id: int
    email: Email
    # None when loaded from a source that withholds credentials
    password_hash: Optional[PasswordHash] = None
    points: int = 0
    participated_initiatives: List[ParticipationRecord] = field(default_factory=list)
    friends: List[int] = field(default_factory=list)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    # Carried opaquely; role handling belongs to the presentation layer
    user_type: Optional[str] = None
    _events: List[Any] = field(default_factory=list, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate invariants."""
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id < 1:
            raise ValueError(f"User id must be a positive integer: {self.id!r}")

        if isinstance(self.points, bool) or not isinstance(self.points, int):
            raise ValueError(f"points must be an integer: {self.points!r}")
        if self.points < 0:
            raise ValueError(f"points cannot be negative: {self.points}")

    @staticmethod
    def create(
        user_id: int,
        email: Email,
        password: str,
        user_type: Optional[str] = None,
    ) -> "User":
        """Factory method to create a new user on signup.

        Args:
            user_id: Id assigned by the store
            email: Unique email
            password: Plaintext password, hashed immediately
            user_type: Optional opaque role label

        Returns:
            New User instance with UserCreated event

        Raises:
            ValueError: If the password is empty or the id invalid
        """
        from virgin_initiatives.domain.user.core.events.user_created import UserCreated

        user = User(
            id=user_id,
            email=email,
            password_hash=PasswordHash.from_plaintext(password),
            user_type=user_type,
        )
        user._add_event(UserCreated(user_id=user_id, email=email.value))
        return user

    def verify_password(self, password: str) -> bool:
        """Check a plaintext password against the stored hash."""
        if self.password_hash is None:
            return False
        return self.password_hash.verify(password)

    def authenticate(self, password: str) -> bool:
        """Verify credentials and record a successful sign-in.

        Emits UserAuthenticated only when the password matches.

        Examples:
            >>> user = User.create(1, Email("jane@virgin.com"), "s3cret")
            >>> _ = user.collect_events()
            >>> user.authenticate("s3cret")
            True
            >>> [e.__class__.__name__ for e in user.collect_events()]
            ['UserAuthenticated']
        """
        from virgin_initiatives.domain.user.core.events.user_authenticated import (
            UserAuthenticated,
        )

        if not self.verify_password(password):
            return False

        self._add_event(UserAuthenticated(user_id=self.id, email=self.email.value))
        return True

    def apply_profile_patch(self, patch: ProfilePatch) -> None:
        """Apply a partial profile update.

        The password, when present, is re-hashed with a fresh salt.

        Args:
            patch: Validated partial update
        """
        from virgin_initiatives.domain.user.core.events.user_updated import UserProfileUpdated

        for name, value in patch.display_fields().items():
            setattr(self, name, value)

        if patch.password is not None:
            self.password_hash = PasswordHash.from_plaintext(patch.password)

        self._add_event(
            UserProfileUpdated(
                user_id=self.id,
                email=self.email.value,
                changed_fields=tuple(patch.changed_fields()),
            )
        )

    def record_participation(self, record: ParticipationRecord) -> None:
        """Append a participation and add its points to the total."""
        self.participated_initiatives.append(record)
        self.points += record.points_earned

    def _add_event(self, event: Any) -> None:
        """Add domain event to internal list."""
        self._events.append(event)

    def collect_events(self) -> List[Any]:
        """Collect and clear domain events.

        Returns:
            List of domain events that occurred
        """
        events = self._events.copy()
        self._events.clear()
        return events

    def __eq__(self, other: object) -> bool:
        """Equality based on id (aggregate identity)."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on id (aggregate identity)."""
        return hash(self.id)
