"""Errors raised by user stores and the user aggregate."""


class UserDomainError(Exception):
    """Root of the user error hierarchy."""


class UserNotFoundError(UserDomainError):
    """No account is registered under this email."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"No user registered with email {email}")


class UserAlreadyExistsError(UserDomainError):
    """Signup attempted with an email that is already registered."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email already registered: {email}")


class InvalidProfilePatchError(UserDomainError):
    """Profile update contains unknown, immutable or invalid fields."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid profile update: {reason}")


class UserStoreUnavailableError(UserDomainError):
    """User store could not be reached or returned unreadable data.

    Raised by adapters for network failures, non-2xx responses, timeouts
    and malformed payloads, so callers can tell "unavailable" apart from
    "not found" or "wrong credentials".
    """

    def __init__(self, operation: str, reason: str, status_code: int = 0):
        """Initialize with failure details.

        Args:
            operation: Store operation that failed (e.g. "list_users")
            reason: Human-readable reason
            status_code: HTTP status when applicable, 0 otherwise
        """
        self.operation = operation
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"User store unavailable during {operation}: {reason}")
