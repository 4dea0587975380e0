"""User store port (interface)."""

from abc import ABC, abstractmethod
from typing import List, Optional

from virgin_initiatives.domain.user.core.entities.user import User
from virgin_initiatives.domain.user.core.value_objects.email import Email
from virgin_initiatives.domain.user.core.value_objects.profile_patch import ProfilePatch


class IUserStore(ABC):
    """Store interface for the User aggregate.

    Defines the lookups and mutations the session layer and the queries
    need. Every method may raise UserStoreUnavailableError when the backing
    file, service or network cannot be used; domain outcomes (missing user,
    duplicate email) have their own exceptions or return values.

    Examples:
        >>> class DictUserStore(IUserStore):
        ...     async def find_by_email(self, email: Email) -> Optional[User]:
        ...         return self._users.get(email.value)
    """

    @abstractmethod
    async def list_users(self) -> List[User]:
        """Return every user, in store order."""
        pass

    @abstractmethod
    async def find_by_email(self, email: Email) -> Optional[User]:
        """Find user by exact email.

        Returns:
            User entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_id(self, user_id: int) -> Optional[User]:
        """Find user by store id.

        Returns:
            User entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def verify_credentials(self, email: Email, password: str) -> Optional[User]:
        """Check an email/password pair.

        Args:
            email: Exact email to look up
            password: Plaintext password to check against the stored hash

        Returns:
            The matching user, or None when the email is unknown or the
            password does not match (the two cases are indistinguishable)
        """
        pass

    @abstractmethod
    async def create(
        self, email: Email, password: str, user_type: Optional[str] = None
    ) -> User:
        """Register a new user.

        Returns:
            The created user with its assigned id

        Raises:
            UserAlreadyExistsError: If the email is already registered
            ValueError: If the store rejects the signup data
        """
        pass

    @abstractmethod
    async def update_profile(self, email: Email, patch: ProfilePatch) -> User:
        """Apply a partial profile update.

        Returns:
            The updated user

        Raises:
            UserNotFoundError: If no user has this email
            InvalidProfilePatchError: If the store rejects the patch
        """
        pass

    @abstractmethod
    async def list_friends(self, email: Email) -> List[User]:
        """Return the users listed as friends of email, in store order.

        Unknown friend ids are ignored.

        Raises:
            UserNotFoundError: If no user has this email
        """
        pass
