"""Session manager.

Owns the signed-in identity of one client context: login, signup, logout,
restore on startup and profile updates. Store and storage are injected, so
the manager can be driven without any UI around it.

Every public operation returns an explicit result (``bool`` or ``Session``).
Store outages, timeouts and superseded results are recovered here and
reported through ``last_failure``; they never escape as exceptions.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Mapping, Optional, TypeVar, Union

from virgin_initiatives.domain.session.ports.session_storage import ISessionStorage
from virgin_initiatives.domain.session.session import (
    SIGNED_OUT,
    Session,
    SessionState,
    SessionUser,
)
from virgin_initiatives.domain.shared.ports.event_bus import IEventBus
from virgin_initiatives.domain.user.core.entities.user import User
from virgin_initiatives.domain.user.core.exceptions.user_errors import (
    InvalidProfilePatchError,
    UserAlreadyExistsError,
    UserNotFoundError,
    UserStoreUnavailableError,
)
from virgin_initiatives.domain.user.core.ports.user_store import IUserStore
from virgin_initiatives.domain.user.core.value_objects.email import Email
from virgin_initiatives.domain.user.core.value_objects.profile_patch import ProfilePatch

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_STORAGE_KEY = "user"
DEFAULT_TIMEOUT_S = 10.0


class SessionFailure(str, Enum):
    """Why the last session operation returned False."""

    INVALID_CREDENTIALS = "invalid_credentials"
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_INPUT = "invalid_input"
    NOT_SIGNED_IN = "not_signed_in"
    UNKNOWN_USER = "unknown_user"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"
    SUPERSEDED = "superseded"


class _OperationFailed(Exception):
    def __init__(self, failure: SessionFailure):
        self.failure = failure
        super().__init__(failure.value)


class SessionManager:
    """Session state machine for one client context.

    States: SIGNED_OUT -> SIGNED_IN (login, signup, restore) -> SIGNED_OUT
    (logout). Each state change bumps a generation counter; an operation
    that awaited the store while the generation moved drops its result.

    Examples:
        >>> manager = SessionManager(InMemoryUserStore(), InMemorySessionStorage())
        >>> await manager.signup("jane@virgin.com", "s3cret")
        True
        >>> manager.state
        <SessionState.SIGNED_IN: 'signed_in'>
        >>> manager.logout()
        >>> await manager.login("jane@virgin.com", "wrong")
        False
        >>> manager.last_failure
        <SessionFailure.INVALID_CREDENTIALS: 'invalid_credentials'>
    """

    def __init__(
        self,
        user_store: IUserStore,
        storage: ISessionStorage,
        event_bus: Optional[IEventBus] = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        if timeout_s <= 0:
            raise ValueError("timeout_s must be positive")
        self.user_store = user_store
        self.storage = storage
        self.event_bus = event_bus
        self.storage_key = storage_key
        self.timeout_s = timeout_s
        self._session: Session = SIGNED_OUT
        self._generation = 0
        self.last_failure: Optional[SessionFailure] = None

    @property
    def session(self) -> Session:
        return self._session

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def current_user(self) -> Optional[SessionUser]:
        return self._session.user

    @property
    def generation(self) -> int:
        return self._generation

    # -- state transitions -------------------------------------------------

    def _establish(self, user: SessionUser) -> None:
        session = Session(user=user)
        serialized = session.serialize()
        if serialized is None:
            raise RuntimeError("Cannot establish a session without a user")
        self.storage.set_item(self.storage_key, serialized)
        self._session = session
        self._generation += 1
        self.last_failure = None

    def _clear(self) -> None:
        self.storage.remove_item(self.storage_key)
        self._session = SIGNED_OUT
        self._generation += 1

    def _fail(self, operation: str, failure: SessionFailure) -> bool:
        self.last_failure = failure
        logger.info(
            "Session operation failed",
            extra={"operation": operation, "failure": failure.value},
        )
        return False

    async def _call(self, awaitable: Awaitable[T]) -> T:
        """Await a store call under the timeout."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout_s)
        except asyncio.TimeoutError as e:
            raise _OperationFailed(SessionFailure.TIMEOUT) from e
        except UserStoreUnavailableError as e:
            logger.warning("User store unavailable", extra={"error": str(e)})
            raise _OperationFailed(SessionFailure.UNAVAILABLE) from e

    async def _publish(self, user: User) -> None:
        events = user.collect_events()
        if self.event_bus is None:
            return
        for event in events:
            await self.event_bus.publish(event)

    # -- public operations -------------------------------------------------

    async def login(self, email: str, password: str) -> bool:
        """Sign in with email and password.

        On failure the previous session, if any, is left unchanged.
        """
        generation = self._generation
        try:
            address = Email(email)
        except ValueError:
            return self._fail("login", SessionFailure.INVALID_INPUT)

        try:
            user = await self._call(self.user_store.verify_credentials(address, password))
        except _OperationFailed as e:
            return self._fail("login", e.failure)

        if user is None:
            return self._fail("login", SessionFailure.INVALID_CREDENTIALS)
        if generation != self._generation:
            return self._fail("login", SessionFailure.SUPERSEDED)

        self._establish(SessionUser.from_user(user))
        logger.info("User signed in", extra={"user_id": user.id})
        await self._publish(user)
        return True

    async def signup(self, email: str, password: str, user_type: Optional[str] = None) -> bool:
        """Register a new account and sign in as it."""
        generation = self._generation
        try:
            address = Email(email)
        except ValueError:
            return self._fail("signup", SessionFailure.INVALID_INPUT)
        if not isinstance(password, str) or not password:
            return self._fail("signup", SessionFailure.INVALID_INPUT)

        try:
            user = await self._call(self.user_store.create(address, password, user_type))
        except _OperationFailed as e:
            return self._fail("signup", e.failure)
        except UserAlreadyExistsError:
            return self._fail("signup", SessionFailure.DUPLICATE_EMAIL)
        except ValueError:
            return self._fail("signup", SessionFailure.INVALID_INPUT)

        if generation != self._generation:
            return self._fail("signup", SessionFailure.SUPERSEDED)

        self._establish(SessionUser.from_user(user))
        logger.info("User signed up", extra={"user_id": user.id})
        await self._publish(user)
        return True

    def logout(self) -> None:
        """Clear the session and its stored copy. Idempotent."""
        was_signed_in = self._session.is_signed_in
        self._clear()
        self.last_failure = None
        if was_signed_in:
            logger.info("User signed out")

    def restore_session(self) -> Session:
        """Adopt the stored session, if any, without contacting the store.

        A corrupt stored value is removed and yields a signed-out session.
        """
        raw = self.storage.get_item(self.storage_key)
        if raw is None:
            self._session = SIGNED_OUT
            self._generation += 1
            return self._session

        try:
            session = Session.deserialize(raw)
        except ValueError as e:
            logger.warning("Discarding corrupt stored session", extra={"error": str(e)})
            self._clear()
            return self._session

        self._session = session
        self._generation += 1
        logger.debug("Session restored from storage")
        return session

    async def revalidate_session(self) -> bool:
        """Check that the signed-in email still exists in the store.

        Signs out when the account is gone. A store outage keeps the
        session and returns False with UNAVAILABLE or TIMEOUT.
        """
        user_session = self._session.user
        if user_session is None:
            return self._fail("revalidate", SessionFailure.NOT_SIGNED_IN)

        generation = self._generation
        try:
            user = await self._call(self.user_store.find_by_email(Email(user_session.email)))
        except _OperationFailed as e:
            return self._fail("revalidate", e.failure)

        if generation != self._generation:
            return self._fail("revalidate", SessionFailure.SUPERSEDED)
        if user is None:
            self._clear()
            return self._fail("revalidate", SessionFailure.UNKNOWN_USER)

        self._establish(SessionUser.from_user(user))
        return True

    async def update_profile(self, patch: Union[ProfilePatch, Mapping[str, Any]]) -> bool:
        """Apply a partial profile update for the signed-in user.

        On success the session display fields are refreshed from the store;
        on failure the session is left untouched.
        """
        user_session = self._session.user
        if user_session is None:
            return self._fail("update_profile", SessionFailure.NOT_SIGNED_IN)

        if not isinstance(patch, ProfilePatch):
            if not isinstance(patch, Mapping):
                return self._fail("update_profile", SessionFailure.INVALID_INPUT)
            try:
                patch = ProfilePatch.from_mapping(patch)
            except (InvalidProfilePatchError, TypeError, ValueError):
                return self._fail("update_profile", SessionFailure.INVALID_INPUT)

        generation = self._generation
        try:
            user = await self._call(
                self.user_store.update_profile(Email(user_session.email), patch)
            )
        except _OperationFailed as e:
            return self._fail("update_profile", e.failure)
        except UserNotFoundError:
            return self._fail("update_profile", SessionFailure.UNKNOWN_USER)
        except (InvalidProfilePatchError, ValueError):
            return self._fail("update_profile", SessionFailure.INVALID_INPUT)

        if generation != self._generation:
            return self._fail("update_profile", SessionFailure.SUPERSEDED)

        self._establish(SessionUser.from_user(user))
        logger.info(
            "Profile updated",
            extra={"user_id": user.id, "fields": patch.changed_fields()},
        )
        await self._publish(user)
        return True
