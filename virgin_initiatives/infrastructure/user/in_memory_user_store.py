"""In-memory User store for testing."""

from typing import Dict, List, Optional

from virgin_initiatives.domain.user.core.entities.user import User
from virgin_initiatives.domain.user.core.exceptions.user_errors import (
    UserAlreadyExistsError,
    UserNotFoundError,
)
from virgin_initiatives.domain.user.core.ports.user_store import IUserStore
from virgin_initiatives.domain.user.core.value_objects.email import Email
from virgin_initiatives.domain.user.core.value_objects.profile_patch import ProfilePatch


class InMemoryUserStore(IUserStore):
    """In-memory implementation of the User store.

    Stores users keyed by email, in insertion order. Ids are assigned as
    max(existing id) + 1.

    Examples:
        >>> store = InMemoryUserStore()
        >>> user = await store.create(Email("jane@virgin.com"), "s3cret")
        >>> user.id
        1
        >>> await store.verify_credentials(Email("jane@virgin.com"), "s3cret")
        User(id=1, ...)
    """

    def __init__(self) -> None:
        """Initialize empty in-memory storage."""
        self._users: Dict[str, User] = {}

    def add(self, user: User) -> None:
        """Insert or replace a user directly (test seeding)."""
        self._users[user.email.value] = user

    async def list_users(self) -> List[User]:
        return list(self._users.values())

    async def find_by_email(self, email: Email) -> Optional[User]:
        return self._users.get(email.value)

    async def find_by_id(self, user_id: int) -> Optional[User]:
        for user in self._users.values():
            if user.id == user_id:
                return user
        return None

    async def verify_credentials(self, email: Email, password: str) -> Optional[User]:
        user = self._users.get(email.value)
        if user is None or not user.authenticate(password):
            return None
        return user

    async def create(
        self, email: Email, password: str, user_type: Optional[str] = None
    ) -> User:
        if email.value in self._users:
            raise UserAlreadyExistsError(email.value)

        next_id = max((u.id for u in self._users.values()), default=0) + 1
        user = User.create(next_id, email, password, user_type=user_type)
        self._users[email.value] = user
        return user

    async def update_profile(self, email: Email, patch: ProfilePatch) -> User:
        user = self._users.get(email.value)
        if user is None:
            raise UserNotFoundError(email.value)

        user.apply_profile_patch(patch)
        return user

    async def list_friends(self, email: Email) -> List[User]:
        user = self._users.get(email.value)
        if user is None:
            raise UserNotFoundError(email.value)

        friend_ids = set(user.friends)
        return [u for u in self._users.values() if u.id in friend_ids]

    def clear(self) -> None:
        """Clear all users from memory. Useful for test cleanup."""
        self._users.clear()

    def count(self) -> int:
        """Get total number of users in memory."""
        return len(self._users)
