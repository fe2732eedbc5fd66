"""In-memory key-value store."""

from dataclasses import dataclass, field

from calorie_tracker.services.storage import KeyValueStore


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store that lives for the process lifetime."""

    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        """Return the stored value, if present."""
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value."""
        self.values[key] = value

    def remove(self, key: str) -> None:
        """Delete a key if present."""
        self.values.pop(key, None)
