"""Profile change audit handler."""

import logging
from dataclasses import dataclass

from virgin_initiatives.domain.user.core.events.user_updated import UserProfileUpdated

logger = logging.getLogger(__name__)


@dataclass
class UserProfileUpdatedHandler:
    """Logs the names of the changed profile fields, never their values.

    A password change goes out at warning level.
    """

    async def handle(self, event: UserProfileUpdated) -> None:
        extra = {
            **event.log_context(),
            "user_id": event.user_id,
            "changed_fields": list(event.changed_fields),
        }
        if event.password_changed:
            logger.warning("Password changed", extra=extra)
        else:
            logger.info("Profile fields changed", extra=extra)
