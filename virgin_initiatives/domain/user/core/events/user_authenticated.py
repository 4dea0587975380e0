"""UserAuthenticated domain event."""

from dataclasses import dataclass

from virgin_initiatives.domain.shared.events import DomainEvent


@dataclass(frozen=True)
class UserAuthenticated(DomainEvent):
    """Domain event: User successfully signed in.

    Emitted after the credential check passes. Can be used for analytics,
    last login tracking, etc.

    Attributes:
        user_id: Store-assigned user id
        email: Email used to sign in
    """

    user_id: int
    email: str
