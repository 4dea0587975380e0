"""Email value object."""

from dataclasses import dataclass

MAX_EMAIL_LENGTH = 254


@dataclass(frozen=True)
class Email:
    """User email value object.

    Primary lookup key for users. Matching is exact and case-sensitive:
    ``Email("A@x.io") != Email("a@x.io")``.

    Examples:
        >>> email = Email("jane@virgin.com")
        >>> email.value
        'jane@virgin.com'

        >>> email.domain
        'virgin.com'

    Raises:
        ValueError: If empty, missing '@' or too long
    """

    value: str

    def __post_init__(self) -> None:
        """Validate email format."""
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("Email cannot be empty")

        if self.value != self.value.strip():
            raise ValueError(f"Email has surrounding whitespace: {self.value!r}")

        if "@" not in self.value:
            raise ValueError(f"Invalid email format: {self.value}. Expected <local>@<domain>")

        if len(self.value) > MAX_EMAIL_LENGTH:
            raise ValueError(
                f"Email too long ({len(self.value)} chars). "
                f"Maximum {MAX_EMAIL_LENGTH} characters allowed"
            )

    @property
    def domain(self) -> str:
        """Part after the last '@'."""
        return self.value.rsplit("@", 1)[1]

    def __str__(self) -> str:
        """String representation returns the raw address."""
        return self.value

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"Email('{self.value}')"
