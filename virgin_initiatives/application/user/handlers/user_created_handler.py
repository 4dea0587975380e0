"""Signup audit handler."""

import logging
from dataclasses import dataclass

from virgin_initiatives.domain.user.core.events.user_created import UserCreated

logger = logging.getLogger(__name__)


@dataclass
class UserCreatedHandler:
    """Records each new account.

    The email is left out of the log record; the user id identifies the
    account.

    Examples:
        >>> handler = UserCreatedHandler()
        >>> await handler.handle(UserCreated(user_id=1, email="jane@virgin.com"))
    """

    async def handle(self, event: UserCreated) -> None:
        logger.info(
            "Account registered",
            extra={**event.log_context(), "user_id": event.user_id},
        )
