"""HTTP User store - client of the users API.

Implements IUserStore against the users service routes:

- GET  /users                 -> {users: [...]}
- POST /users                 -> signup, or profile update with isUpdate
- POST /users/login           -> credential check
- GET  /users/friends?email=  -> {success, friends: [...]}
- GET  /users/{id}            -> {success, user}

Key Features:
- Bounded timeout on every request
- Retry with exponential backoff on transport errors and 5xx responses
- Every transport, status and payload failure mapped to UserStoreUnavailableError,
  except 400 rejections, which surface as the caller's validation errors
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from virgin_initiatives.domain.user.core.entities.user import User
from virgin_initiatives.domain.user.core.exceptions.user_errors import (
    InvalidProfilePatchError,
    UserAlreadyExistsError,
    UserNotFoundError,
    UserStoreUnavailableError,
)
from virgin_initiatives.domain.user.core.ports.user_store import IUserStore
from virgin_initiatives.domain.user.core.value_objects.email import Email
from virgin_initiatives.domain.user.core.value_objects.profile_patch import (
    FIELD_ALIASES,
    ProfilePatch,
)
from virgin_initiatives.infrastructure.user.mappers import user_from_record

logger = logging.getLogger(__name__)

_WIRE_NAMES = {attr: key for key, attr in FIELD_ALIASES.items()}


class _ServerError(Exception):
    """5xx response, retried like a transport error."""

    def __init__(self, response: httpx.Response):
        self.response = response
        super().__init__(f"Server error {response.status_code}")


class HttpUserStore(IUserStore):
    """
    Users API client implementing the IUserStore port.

    Example:
        >>> async with HttpUserStore("http://localhost:8000") as store:
        ...     user = await store.verify_credentials(Email("jane@virgin.com"), "s3cret")
    """

    def __init__(
        self,
        base_url: str,
        timeout_s: float = 10.0,
        retry_attempts: int = 3,
        retry_backoff_s: float = 0.5,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Users API root (e.g. "http://localhost:8000")
            timeout_s: Per-request timeout
            retry_attempts: Total attempts for retryable failures (>= 1)
            retry_backoff_s: Exponential backoff multiplier
            client: Pre-built httpx client (tests); created lazily otherwise
        """
        if retry_attempts < 1:
            raise ValueError("retry_attempts must be >= 1")
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.retry_attempts = retry_attempts
        self.retry_backoff_s = retry_backoff_s
        self._client = client

    async def __aenter__(self) -> "HttpUserStore":
        self._require_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout_s),
            )
        return self._client

    async def _request(
        self, operation: str, method: str, path: str, **kwargs: Any
    ) -> httpx.Response:
        client = self._require_client()
        logger.debug("Users API request", extra={"operation": operation, "path": path})

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.retry_attempts),
                wait=wait_exponential(multiplier=self.retry_backoff_s, min=0, max=10),
                retry=retry_if_exception_type((httpx.TransportError, _ServerError)),
                reraise=True,
            ):
                with attempt:
                    response = await client.request(method, path, **kwargs)
                    if response.status_code >= 500:
                        raise _ServerError(response)
        except _ServerError as e:
            status = e.response.status_code
            logger.warning(
                "Users API server error",
                extra={"operation": operation, "status": status},
            )
            raise UserStoreUnavailableError(operation, f"HTTP {status}", status) from e
        except httpx.HTTPError as e:
            logger.error(
                "Users API unreachable",
                extra={"operation": operation, "error": str(e)},
            )
            raise UserStoreUnavailableError(operation, str(e) or type(e).__name__) from e

        return response

    @staticmethod
    def _json(operation: str, response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise UserStoreUnavailableError(
                operation, "response is not valid JSON", response.status_code
            ) from e
        if not isinstance(data, dict):
            raise UserStoreUnavailableError(
                operation, "response is not a JSON object", response.status_code
            )
        return data

    def _unexpected(self, operation: str, response: httpx.Response) -> UserStoreUnavailableError:
        return UserStoreUnavailableError(
            operation, f"unexpected HTTP {response.status_code}", response.status_code
        )

    @staticmethod
    def _rejection(response: httpx.Response, default: str) -> str:
        """Message of a 400 response, or default when the body has none."""
        try:
            data = response.json()
        except ValueError:
            return default
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return default

    @staticmethod
    def _user(operation: str, record: Any) -> User:
        try:
            return user_from_record(record)
        except (ValueError, TypeError) as e:
            raise UserStoreUnavailableError(operation, f"malformed user record: {e}") from e

    async def list_users(self) -> List[User]:
        operation = "list_users"
        response = await self._request(operation, "GET", "/users")
        if response.status_code != 200:
            raise self._unexpected(operation, response)

        records = self._json(operation, response).get("users")
        if not isinstance(records, list):
            raise UserStoreUnavailableError(operation, "response has no 'users' list")
        return [self._user(operation, r) for r in records]

    async def find_by_email(self, email: Email) -> Optional[User]:
        for user in await self.list_users():
            if user.email == email:
                return user
        return None

    async def find_by_id(self, user_id: int) -> Optional[User]:
        operation = "find_by_id"
        response = await self._request(operation, "GET", f"/users/{user_id}")
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise self._unexpected(operation, response)
        return self._user(operation, self._json(operation, response).get("user"))

    async def verify_credentials(self, email: Email, password: str) -> Optional[User]:
        operation = "verify_credentials"
        response = await self._request(
            operation,
            "POST",
            "/users/login",
            json={"email": email.value, "password": password},
        )
        if response.status_code in (401, 404):
            return None
        if response.status_code != 200:
            raise self._unexpected(operation, response)

        data = self._json(operation, response)
        if not data.get("success"):
            return None
        return self._user(operation, data.get("user"))

    async def create(
        self, email: Email, password: str, user_type: Optional[str] = None
    ) -> User:
        operation = "create"
        body: Dict[str, Any] = {"email": email.value, "password": password}
        if user_type is not None:
            body["userType"] = user_type

        response = await self._request(operation, "POST", "/users", json=body)
        if response.status_code == 409:
            raise UserAlreadyExistsError(email.value)
        if response.status_code == 400:
            raise ValueError(self._rejection(response, "signup rejected"))
        if response.status_code != 200:
            raise self._unexpected(operation, response)

        data = self._json(operation, response)
        if not data.get("success"):
            raise UserStoreUnavailableError(operation, str(data.get("message", "signup failed")))
        if data.get("user") is not None:
            return self._user(operation, data["user"])

        user = await self.find_by_email(email)
        if user is None:
            raise UserStoreUnavailableError(operation, "created user not visible")
        return user

    async def update_profile(self, email: Email, patch: ProfilePatch) -> User:
        operation = "update_profile"
        body: Dict[str, Any] = {
            _WIRE_NAMES.get(name, name): getattr(patch, name) for name in patch.changed_fields()
        }
        body.update({"email": email.value, "isUpdate": True})

        response = await self._request(operation, "POST", "/users", json=body)
        if response.status_code == 404:
            raise UserNotFoundError(email.value)
        if response.status_code == 400:
            raise InvalidProfilePatchError(self._rejection(response, "update rejected"))
        if response.status_code != 200:
            raise self._unexpected(operation, response)

        data = self._json(operation, response)
        if not data.get("success"):
            raise UserStoreUnavailableError(operation, str(data.get("message", "update failed")))
        return self._user(operation, data.get("user"))

    async def list_friends(self, email: Email) -> List[User]:
        operation = "list_friends"
        response = await self._request(
            operation, "GET", "/users/friends", params={"email": email.value}
        )
        if response.status_code == 404:
            raise UserNotFoundError(email.value)
        if response.status_code != 200:
            raise self._unexpected(operation, response)

        friends = self._json(operation, response).get("friends")
        if not isinstance(friends, list):
            raise UserStoreUnavailableError(operation, "response has no 'friends' list")
        return [self._user(operation, f) for f in friends]
