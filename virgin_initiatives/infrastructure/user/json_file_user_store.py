"""JSON file User store.

File-backed store over a ``{"users": [...]}`` document, the format used by
the original users route handlers. Every operation re-reads the file so
external edits are picked up; writes are serialized with an asyncio.Lock
and replace the file atomically.

File I/O and password hashing run in worker threads so that a caller's
``asyncio.wait_for`` can still time out. Records holding a legacy
plaintext ``password`` are hashed once, on the first read that sees them,
and written back as ``passwordHash`` under the write lock.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from virgin_initiatives.domain.user.core.entities.user import User
from virgin_initiatives.domain.user.core.exceptions.user_errors import (
    UserAlreadyExistsError,
    UserNotFoundError,
    UserStoreUnavailableError,
)
from virgin_initiatives.domain.user.core.ports.user_store import IUserStore
from virgin_initiatives.domain.user.core.value_objects.email import Email
from virgin_initiatives.domain.user.core.value_objects.profile_patch import ProfilePatch
from virgin_initiatives.infrastructure.user.mappers import user_from_record, user_to_record

logger = logging.getLogger(__name__)


def _is_legacy(record: Any) -> bool:
    return isinstance(record, dict) and bool(record.get("password")) and not record.get(
        "passwordHash"
    )


class JsonFileUserStore(IUserStore):
    """User store persisted to a single JSON file.

    A missing file is an empty store (it is created on the first write).
    An unreadable or malformed file raises UserStoreUnavailableError rather
    than silently reading as empty.

    Example:
        >>> store = JsonFileUserStore("data/users.json")
        >>> user = await store.find_by_email(Email("jane@virgin.com"))
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._write_lock = asyncio.Lock()

    def _read_records(self, operation: str) -> List[Any]:
        if not self.path.exists():
            return []

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(
                "Error reading users file",
                extra={"path": str(self.path), "error": str(e)},
            )
            raise UserStoreUnavailableError(operation, f"cannot read {self.path}: {e}") from e

        records = data.get("users") if isinstance(data, dict) else None
        if not isinstance(records, list):
            raise UserStoreUnavailableError(operation, "users file has no 'users' list")
        return records

    @staticmethod
    def _to_users(operation: str, records: List[Any]) -> List[User]:
        try:
            return [user_from_record(r) for r in records]
        except (ValueError, TypeError) as e:
            raise UserStoreUnavailableError(operation, f"malformed user record: {e}") from e

    def _read_users(self, operation: str) -> List[User]:
        """Read every user, migrating legacy passwords. Caller holds the write lock."""
        records = self._read_records(operation)
        users = self._to_users(operation, records)

        legacy = sum(1 for r in records if _is_legacy(r))
        if legacy:
            self._write_users(operation, users)
            logger.info(
                "Migrated legacy plaintext passwords",
                extra={"path": str(self.path), "count": legacy},
            )
        return users

    def _write_users(self, operation: str, users: List[User]) -> None:
        document: Dict[str, Any] = {"users": [user_to_record(u) for u in users]}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            logger.error(
                "Error writing users file",
                extra={"path": str(self.path), "error": str(e)},
            )
            raise UserStoreUnavailableError(operation, f"cannot write {self.path}: {e}") from e

    async def _load(self, operation: str) -> List[User]:
        records = await asyncio.to_thread(self._read_records, operation)
        if not any(_is_legacy(r) for r in records):
            return self._to_users(operation, records)

        async with self._write_lock:
            return await asyncio.to_thread(self._read_users, operation)

    async def list_users(self) -> List[User]:
        return await self._load("list_users")

    async def find_by_email(self, email: Email) -> Optional[User]:
        for user in await self._load("find_by_email"):
            if user.email == email:
                return user
        return None

    async def find_by_id(self, user_id: int) -> Optional[User]:
        for user in await self._load("find_by_id"):
            if user.id == user_id:
                return user
        return None

    async def verify_credentials(self, email: Email, password: str) -> Optional[User]:
        user = await self.find_by_email(email)
        if user is None:
            return None
        if not await asyncio.to_thread(user.authenticate, password):
            return None
        return user

    def _create(self, email: Email, password: str, user_type: Optional[str]) -> User:
        users = self._read_users("create")
        if any(u.email == email for u in users):
            raise UserAlreadyExistsError(email.value)

        next_id = max((u.id for u in users), default=0) + 1
        user = User.create(next_id, email, password, user_type=user_type)
        users.append(user)
        self._write_users("create", users)
        return user

    async def create(
        self, email: Email, password: str, user_type: Optional[str] = None
    ) -> User:
        async with self._write_lock:
            user = await asyncio.to_thread(self._create, email, password, user_type)

        logger.info("User created", extra={"user_id": user.id})
        return user

    def _update_profile(self, email: Email, patch: ProfilePatch) -> User:
        users = self._read_users("update_profile")
        user = next((u for u in users if u.email == email), None)
        if user is None:
            raise UserNotFoundError(email.value)

        user.apply_profile_patch(patch)
        self._write_users("update_profile", users)
        return user

    async def update_profile(self, email: Email, patch: ProfilePatch) -> User:
        async with self._write_lock:
            user = await asyncio.to_thread(self._update_profile, email, patch)

        logger.info(
            "User profile updated",
            extra={"user_id": user.id, "fields": patch.changed_fields()},
        )
        return user

    async def list_friends(self, email: Email) -> List[User]:
        users = await self._load("list_friends")
        user = next((u for u in users if u.email == email), None)
        if user is None:
            raise UserNotFoundError(email.value)

        # Store order, each friend once; unknown ids are ignored
        friend_ids = set(user.friends)
        return [u for u in users if u.id in friend_ids]
