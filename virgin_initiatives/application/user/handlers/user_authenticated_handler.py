"""Sign-in audit handler."""

import logging
from dataclasses import dataclass

from virgin_initiatives.domain.user.core.events.user_authenticated import UserAuthenticated

logger = logging.getLogger(__name__)


@dataclass
class UserAuthenticatedHandler:
    async def handle(self, event: UserAuthenticated) -> None:
        logger.info(
            "Sign-in succeeded",
            extra={**event.log_context(), "user_id": event.user_id},
        )
