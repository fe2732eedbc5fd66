"""Key-value storage interface shared by the services."""

from typing import Protocol

DATA_KEY = "app_data"
SESSION_KEY = "app_session"
THEME_KEY = "app_theme"


class KeyValueStore(Protocol):
    """Synchronous string key-value storage."""

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    def remove(self, key: str) -> None:
        """Delete a key if it exists."""
