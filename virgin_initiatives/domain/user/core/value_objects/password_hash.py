"""PasswordHash value object."""

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

MIN_PASSWORD_LENGTH = 1


@dataclass(frozen=True)
class PasswordHash:
    """Salted one-way hash of a user password.

    Wraps the werkzeug ``method$salt$hash`` format. The plaintext is never
    stored; verification uses a constant-time comparison.

    Examples:
        >>> hashed = PasswordHash.from_plaintext("s3cret")
        >>> hashed.verify("s3cret")
        True
        >>> hashed.verify("wrong")
        False
    """

    value: str

    def __post_init__(self) -> None:
        """Validate hash format."""
        if not self.value or self.value.count("$") < 2:
            raise ValueError("Invalid password hash format")

    @staticmethod
    def from_plaintext(plaintext: str) -> "PasswordHash":
        """Hash a plaintext password with a fresh salt.

        Raises:
            ValueError: If the password is empty
        """
        if not isinstance(plaintext, str) or len(plaintext) < MIN_PASSWORD_LENGTH:
            raise ValueError("Password cannot be empty")
        return PasswordHash(generate_password_hash(plaintext))

    def verify(self, plaintext: str) -> bool:
        """Check plaintext against the stored hash."""
        if not isinstance(plaintext, str):
            return False
        return check_password_hash(self.value, plaintext)

    def __repr__(self) -> str:
        # Never leak the hash into logs or tracebacks
        return "PasswordHash('***')"
