"""Session model for a single client context."""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from virgin_initiatives.domain.user.core.entities.user import User
from virgin_initiatives.domain.user.core.value_objects.email import Email

# Stored key -> SessionUser attribute
_WIRE_FIELDS: Dict[str, str] = {
    "email": "email",
    "firstName": "first_name",
    "lastName": "last_name",
    "company": "company",
    "position": "position",
    "userType": "user_type",
}


class SessionState(str, Enum):
    """Observable session states."""

    SIGNED_OUT = "signed_out"
    SIGNED_IN = "signed_in"


@dataclass(frozen=True)
class SessionUser:
    """Identity and display fields of the signed-in user.

    Never carries the password or its hash.
    """

    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    user_type: Optional[str] = None

    def __post_init__(self) -> None:
        # Reuse the Email invariants
        Email(self.email)

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(
            email=user.email.value,
            first_name=user.first_name,
            last_name=user.last_name,
            company=user.company,
            position=user.position,
            user_type=user.user_type,
        )

    def to_storage_dict(self) -> Dict[str, str]:
        """Wire form with absent fields omitted."""
        data: Dict[str, str] = {}
        for key, attr in _WIRE_FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_storage_dict(cls, data: Dict[str, Any]) -> "SessionUser":
        """Rebuild from the wire form.

        Unknown keys are ignored so older or newer stored shapes still load.

        Raises:
            ValueError: If email is missing/invalid or a field is not a string
        """
        if not isinstance(data, dict):
            raise ValueError("Stored session must be a JSON object")

        values: Dict[str, Optional[str]] = {}
        for key, attr in _WIRE_FIELDS.items():
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"Stored session field {key} must be a string")
            values[attr] = value

        email = values.pop("email")
        if email is None:
            raise ValueError("Stored session is missing email")
        return cls(email=email, **values)


@dataclass(frozen=True)
class Session:
    """The session of one client context: a user or nobody.

    Examples:
        >>> Session().state
        <SessionState.SIGNED_OUT: 'signed_out'>
        >>> Session(SessionUser(email="jane@virgin.com")).is_signed_in
        True
    """

    user: Optional[SessionUser] = None

    @property
    def state(self) -> SessionState:
        return SessionState.SIGNED_IN if self.user is not None else SessionState.SIGNED_OUT

    @property
    def is_signed_in(self) -> bool:
        return self.user is not None

    @property
    def email(self) -> Optional[str]:
        return self.user.email if self.user is not None else None

    def serialize(self) -> Optional[str]:
        """JSON for session storage, or None when signed out."""
        if self.user is None:
            return None
        return json.dumps(self.user.to_storage_dict())

    @classmethod
    def deserialize(cls, raw: str) -> "Session":
        """Parse the stored JSON.

        Raises:
            ValueError: If raw is not valid JSON or not a valid session object
        """
        try:
            data = json.loads(raw)
        except (TypeError, json.JSONDecodeError) as e:
            raise ValueError(f"Stored session is not valid JSON: {e}") from e
        return cls(user=SessionUser.from_storage_dict(data))


SIGNED_OUT = Session()
