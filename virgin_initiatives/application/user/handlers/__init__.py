"""User event handlers."""

from virgin_initiatives.domain.shared.ports.event_bus import IEventBus
from virgin_initiatives.domain.user.core.events.user_authenticated import UserAuthenticated
from virgin_initiatives.domain.user.core.events.user_created import UserCreated
from virgin_initiatives.domain.user.core.events.user_updated import UserProfileUpdated

from .user_authenticated_handler import UserAuthenticatedHandler
from .user_created_handler import UserCreatedHandler
from .user_profile_updated_handler import UserProfileUpdatedHandler


def register_user_handlers(event_bus: IEventBus) -> None:
    """Subscribe the user event handlers to event_bus."""
    event_bus.subscribe(UserCreated, UserCreatedHandler().handle)
    event_bus.subscribe(UserAuthenticated, UserAuthenticatedHandler().handle)
    event_bus.subscribe(UserProfileUpdated, UserProfileUpdatedHandler().handle)


__all__ = [
    "UserAuthenticatedHandler",
    "UserCreatedHandler",
    "UserProfileUpdatedHandler",
    "register_user_handlers",
]
