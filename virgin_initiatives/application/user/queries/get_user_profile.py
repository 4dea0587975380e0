"""Get user profile query."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from virgin_initiatives.domain.user.core.entities.user import User
from virgin_initiatives.domain.user.core.ports.user_store import IUserStore
from virgin_initiatives.domain.user.core.value_objects.email import Email
from virgin_initiatives.domain.user.core.value_objects.participation_record import (
    ParticipationRecord,
)


@dataclass(frozen=True)
class PublicProfile:
    """What anyone may see of a user. Never carries credentials."""

    id: int
    email: str
    points: int
    participated_initiatives: Tuple[ParticipationRecord, ...]

    @classmethod
    def from_user(cls, user: User) -> "PublicProfile":
        return cls(
            id=user.id,
            email=user.email.value,
            points=user.points,
            participated_initiatives=tuple(user.participated_initiatives),
        )


@dataclass(frozen=True)
class FriendSummary:
    """Leaderboard row for a friend."""

    id: int
    email: str
    points: int

    @classmethod
    def from_user(cls, user: User) -> "FriendSummary":
        return cls(id=user.id, email=user.email.value, points=user.points)


@dataclass
class GetUserProfileQuery:
    """Query to read public profiles and friend lists.

    Read-only. Store errors propagate to the caller.

    Examples:
        >>> query = GetUserProfileQuery(store)
        >>> profile = await query.by_id(1)
        >>> friends = await query.friends_of("jane@virgin.com")
    """

    store: IUserStore

    async def by_id(self, user_id: int) -> Optional[PublicProfile]:
        """Get the public profile of a user.

        Args:
            user_id: Store-assigned id

        Returns:
            PublicProfile or None if not found
        """
        user = await self.store.find_by_id(user_id)
        if user is None:
            return None
        return PublicProfile.from_user(user)

    async def friends_of(self, email: str) -> List[FriendSummary]:
        """List a user's friends, in stored order.

        Raises:
            ValueError: If email is not a valid address
            UserNotFoundError: If no user has this email
        """
        friends = await self.store.list_friends(Email(email))
        return [FriendSummary.from_user(friend) for friend in friends]
