"""In-memory session storage."""

from typing import Dict, Optional

from virgin_initiatives.domain.session.ports.session_storage import ISessionStorage


class InMemorySessionStorage(ISessionStorage):
    """Dict-backed storage for one client context.

    One instance per context. Share the instance between SessionManager
    objects to simulate a reload of the same tab.

    Examples:
        >>> storage = InMemorySessionStorage()
        >>> storage.set_item("user", '{"email": "jane@virgin.com"}')
        >>> storage.get_item("user")
        '{"email": "jane@virgin.com"}'
    """

    def __init__(self) -> None:
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError("Session storage values must be strings")
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        """Clear all keys. Useful for test cleanup."""
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)
