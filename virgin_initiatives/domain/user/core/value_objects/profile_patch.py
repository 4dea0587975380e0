"""ProfilePatch value object."""

from dataclasses import dataclass, fields
from typing import Any, Dict, List, Mapping, Optional

from virgin_initiatives.domain.user.core.exceptions.user_errors import InvalidProfilePatchError

# Wire names used by the users API and the stored session
FIELD_ALIASES: Dict[str, str] = {
    "firstName": "first_name",
    "lastName": "last_name",
}

MAX_FIELD_LENGTH = 200


@dataclass(frozen=True)
class ProfilePatch:
    """Partial update of the mutable user fields.

    Only display fields and the password can change. ``None`` means
    "leave unchanged".

    Examples:
        >>> patch = ProfilePatch.from_mapping({"firstName": "Jane", "company": "Virgin Red"})
        >>> patch.first_name
        'Jane'
        >>> patch.changed_fields()
        ['first_name', 'company']
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    password: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate field types and lengths."""
        for name in self.changed_fields():
            value = getattr(self, name)
            if not isinstance(value, str):
                raise InvalidProfilePatchError(f"{name} must be a string")
            if name == "password":
                if not value:
                    raise InvalidProfilePatchError("password cannot be empty")
            elif len(value) > MAX_FIELD_LENGTH:
                raise InvalidProfilePatchError(
                    f"{name} too long ({len(value)} chars, max {MAX_FIELD_LENGTH})"
                )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ProfilePatch":
        """Build a patch from a wire/user supplied mapping.

        Accepts snake_case names and the camelCase aliases in FIELD_ALIASES.

        Raises:
            InvalidProfilePatchError: On unknown or immutable keys, or if the
                mapping changes nothing
        """
        allowed = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = FIELD_ALIASES.get(key, key)
            if name not in allowed:
                raise InvalidProfilePatchError(f"Field cannot be updated: {key}")
            values[name] = value

        patch = cls(**values)
        if not patch.changed_fields():
            raise InvalidProfilePatchError("Profile patch is empty")
        return patch

    def changed_fields(self) -> List[str]:
        """Names of the fields this patch sets, in declaration order."""
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]

    def display_fields(self) -> Dict[str, str]:
        """Changed fields excluding the password."""
        return {
            name: getattr(self, name) for name in self.changed_fields() if name != "password"
        }

    def __repr__(self) -> str:
        shown = ", ".join(
            f"{name}={'***' if name == 'password' else repr(getattr(self, name))}"
            for name in self.changed_fields()
        )
        return f"ProfilePatch({shown})"
