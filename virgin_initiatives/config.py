"""Runtime configuration.

Values come from environment variables, optionally seeded from a ``.env``
file in the working directory. See ``Settings`` for names and defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

USER_STORE_CHOICES = ("inmemory", "json", "http")
CATALOG_SOURCE_CHOICES = ("file", "http")


@dataclass(frozen=True)
class Settings:
    """Application settings.

    Environment Variables:
        USER_STORE: "inmemory" | "json" | "http" (default: json)
        USERS_FILE_PATH: JSON store path (default: data/users.json)
        USERS_API_URL: users API root for the http store
        CATALOG_SOURCE: "file" | "http" (default: file)
        CATALOG_PATH: catalog file (default: data/sample_initiatives.csv)
        CATALOG_URL: catalog URL for the http source
        FETCH_TIMEOUT_S: timeout for store and catalog calls (default: 10)
        SESSION_STORAGE_KEY: session storage key (default: user)
        LOG_LEVEL: root log level (default: INFO)
    """

    user_store: str = "json"
    users_file_path: Path = Path("data/users.json")
    users_api_url: str = "http://localhost:8000"
    catalog_source: str = "file"
    catalog_path: Path = Path("data/sample_initiatives.csv")
    catalog_url: str = ""
    fetch_timeout_s: float = 10.0
    session_storage_key: str = "user"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.user_store not in USER_STORE_CHOICES:
            raise ValueError(
                f"Invalid USER_STORE value: {self.user_store}. "
                f"Expected one of {', '.join(USER_STORE_CHOICES)}"
            )
        if self.catalog_source not in CATALOG_SOURCE_CHOICES:
            raise ValueError(
                f"Invalid CATALOG_SOURCE value: {self.catalog_source}. "
                f"Expected one of {', '.join(CATALOG_SOURCE_CHOICES)}"
            )
        if self.catalog_source == "http" and not self.catalog_url:
            raise ValueError("CATALOG_URL is required when CATALOG_SOURCE=http")
        if self.fetch_timeout_s <= 0:
            raise ValueError("FETCH_TIMEOUT_S must be positive")
        if not self.session_storage_key:
            raise ValueError("SESSION_STORAGE_KEY cannot be empty")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environ (defaults to os.environ).

        Raises:
            ValueError: On invalid values
        """
        env = os.environ if environ is None else environ
        try:
            timeout = float(env.get("FETCH_TIMEOUT_S", "10"))
        except ValueError as e:
            raise ValueError(f"FETCH_TIMEOUT_S must be a number: {e}") from e

        return cls(
            user_store=env.get("USER_STORE", "json").lower(),
            users_file_path=Path(env.get("USERS_FILE_PATH", "data/users.json")),
            users_api_url=env.get("USERS_API_URL", "http://localhost:8000"),
            catalog_source=env.get("CATALOG_SOURCE", "file").lower(),
            catalog_path=Path(env.get("CATALOG_PATH", "data/sample_initiatives.csv")),
            catalog_url=env.get("CATALOG_URL", ""),
            fetch_timeout_s=timeout,
            session_storage_key=env.get("SESSION_STORAGE_KEY", "user"),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Singleton settings, loading ``.env`` on first use."""
    global _settings

    if _settings is None:
        load_dotenv(find_dotenv(usecwd=True))
        _settings = Settings.from_env()

    return _settings


def reset_settings() -> None:
    """Reset the singleton (for testing purposes)."""
    global _settings
    _settings = None
