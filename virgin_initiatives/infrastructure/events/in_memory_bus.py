"""Process-local event bus.

Delivers user events to the handlers registered by the API app and the
SessionManager. Nothing is persisted: subscriptions live as long as the bus.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Type, TypeVar

from virgin_initiatives.domain.shared.events import DomainEvent

logger = logging.getLogger(__name__)

TEvent = TypeVar("TEvent", bound=DomainEvent)

Handler = Callable[[Any], Awaitable[None]]


def _handler_name(handler: Handler) -> str:
    return getattr(handler, "__qualname__", repr(handler))


class InMemoryEventBus:
    """
    IEventBus backed by a dict of handler lists.

    A handler subscribed to a base class also receives its subclasses, so
    ``subscribe(DomainEvent, audit)`` sees every event. For one event,
    handlers for the concrete type run first, then those of its bases,
    each group in subscription order. A failing handler is logged and the
    rest still run.

    Example:
        >>> bus = InMemoryEventBus()
        >>> bus.subscribe(UserAuthenticated, UserAuthenticatedHandler().handle)
        >>> await bus.publish(UserAuthenticated(user_id=1, email="jane@virgin.com"))
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[Handler]] = {}

    def subscribe(
        self,
        event_type: Type[TEvent],
        handler: Callable[[TEvent], Awaitable[None]],
    ) -> None:
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(
            "Handler subscribed",
            extra={"event_type": event_type.__name__, "handler": _handler_name(handler)},
        )

    def handlers_for(self, event_type: Type[DomainEvent]) -> List[Handler]:
        """Handlers that receive events of event_type, in delivery order."""
        matched: List[Handler] = []
        for cls in event_type.__mro__:
            matched.extend(self._handlers.get(cls, []))
        return matched

    async def publish(self, event: DomainEvent) -> None:
        context = event.log_context()
        handlers = self.handlers_for(type(event))
        if not handlers:
            logger.debug("No handlers for event", extra=context)
            return

        logger.info("Publishing event", extra={**context, "handler_count": len(handlers)})

        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                logger.error(
                    "Event handler failed",
                    extra={**context, "handler": _handler_name(handler), "error": str(e)},
                    exc_info=True,
                )

    def unsubscribe(
        self,
        event_type: Type[TEvent],
        handler: Callable[[TEvent], Awaitable[None]],
    ) -> bool:
        """Remove handler from event_type. False if it was not subscribed."""
        handlers = self._handlers.get(event_type, [])
        if handler not in handlers:
            return False
        handlers.remove(handler)
        return True

    def clear(self) -> None:
        self._handlers.clear()

    def get_handler_count(self, event_type: Type[TEvent]) -> int:
        """Handlers subscribed to exactly event_type (bases not counted)."""
        return len(self._handlers.get(event_type, []))
