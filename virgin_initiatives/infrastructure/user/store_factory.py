"""User store factory for settings-based selection.

This factory creates the appropriate store implementation based on
``Settings.user_store`` (USER_STORE environment variable):
- "inmemory": InMemoryUserStore (for testing)
- "json": JsonFileUserStore (default, file-backed)
- "http": HttpUserStore (remote users API)
"""

from typing import Optional

from virgin_initiatives.config import Settings, get_settings
from virgin_initiatives.domain.user.core.ports.user_store import IUserStore
from virgin_initiatives.infrastructure.user.http_user_store import HttpUserStore
from virgin_initiatives.infrastructure.user.in_memory_user_store import InMemoryUserStore
from virgin_initiatives.infrastructure.user.json_file_user_store import JsonFileUserStore


def create_user_store(settings: Optional[Settings] = None) -> IUserStore:
    """Create user store based on configuration.

    Returns:
        IUserStore: The configured store implementation
    """
    settings = settings or get_settings()

    if settings.user_store == "json":
        return JsonFileUserStore(settings.users_file_path)

    if settings.user_store == "http":
        return HttpUserStore(settings.users_api_url, timeout_s=settings.fetch_timeout_s)

    return InMemoryUserStore()


# Singleton instance
_user_store: Optional[IUserStore] = None


def get_user_store() -> IUserStore:
    """Get singleton user store instance."""
    global _user_store

    if _user_store is None:
        _user_store = create_user_store()

    return _user_store


def reset_user_store() -> None:
    """Reset the singleton (for testing purposes)."""
    global _user_store
    _user_store = None
