"""Event bus port (interface).

Defines contract for event publishing and subscription.
Domain defines the port, infrastructure provides the implementation.
"""

from typing import Awaitable, Callable, Protocol, Type, TypeVar

from virgin_initiatives.domain.shared.events import DomainEvent

TEvent = TypeVar("TEvent", bound=DomainEvent)

# Event handler type: async function that takes an event and returns None
EventHandler = Callable[[TEvent], Awaitable[None]]


class IEventBus(Protocol):
    """Interface for event publishing and subscription.

    Example usage (application layer):
        >>> async def on_login(event: UserAuthenticated) -> None:
        ...     print(f"{event.email} signed in")
        >>> bus.subscribe(UserAuthenticated, on_login)
        >>> await bus.publish(UserAuthenticated(user_id=1, email="a@b.c"))
    """

    def subscribe(self, event_type: Type[TEvent], handler: EventHandler[TEvent]) -> None:
        """Register handler for event_type."""
        ...

    async def publish(self, event: DomainEvent) -> None:
        """Deliver event to every handler subscribed to its type or a base of it.

        Implementations must not let a failing handler propagate.
        """
        ...
