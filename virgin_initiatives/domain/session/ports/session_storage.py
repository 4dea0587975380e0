"""Session storage port (interface)."""

from abc import ABC, abstractmethod
from typing import Optional


class ISessionStorage(ABC):
    """Key/value string storage scoped to one client context.

    Mirrors browser tab storage: synchronous, string values, survives a
    reload of the same context and nothing else.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value or None."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove key. Removing a missing key is a no-op."""
        pass
