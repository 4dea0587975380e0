"""UserProfileUpdated domain event."""

from dataclasses import dataclass
from typing import Tuple

from virgin_initiatives.domain.shared.events import DomainEvent


@dataclass(frozen=True)
class UserProfileUpdated(DomainEvent):
    """Domain event: User profile or password changed.

    Attributes:
        user_id: Store-assigned user id
        email: Email of the updated user
        changed_fields: Names of the fields that changed (never their values)
    """

    user_id: int
    email: str
    changed_fields: Tuple[str, ...]

    @property
    def password_changed(self) -> bool:
        return "password" in self.changed_fields
