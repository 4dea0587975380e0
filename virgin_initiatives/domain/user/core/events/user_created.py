"""UserCreated domain event."""

from dataclasses import dataclass

from virgin_initiatives.domain.shared.events import DomainEvent


@dataclass(frozen=True)
class UserCreated(DomainEvent):
    """Domain event: User account created on signup.

    Attributes:
        user_id: Store-assigned user id
        email: Email the account was registered with

    Examples:
        >>> event = UserCreated(user_id=7, email="jane@virgin.com")
        >>> event.occurred_at.tzinfo is not None
        True
    """

    user_id: int
    email: str
