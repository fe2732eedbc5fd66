"""Key-value store persisted as one JSON file."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from calorie_tracker.domain.errors import UnreadableDataError
from calorie_tracker.services.storage import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Store that keeps every key in a single JSON object on disk.

    The file is read on every call and rewritten on every change through a
    temporary sibling file, so a crash mid-write leaves the old contents. A
    file that cannot be parsed reads as empty but is never overwritten.
    """

    path: Path

    def get(self, key: str) -> str | None:
        """Return the stored value, if present."""
        data = self._read()
        return None if data is None else data.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value and flush the file."""
        data = self._read_for_update()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        """Delete a key and flush the file."""
        data = self._read_for_update()
        if data.pop(key, None) is not None:
            self._write(data)

    def _read_for_update(self) -> dict[str, str]:
        data = self._read()
        if data is None:
            raise UnreadableDataError(
                f"Store file {self.path} is unreadable; refusing to overwrite it"
            )
        return data

    def _read(self) -> dict[str, str] | None:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Store file %s is not valid JSON", self.path)
            return None
        if not isinstance(data, dict):
            logger.warning("Store file %s is not a JSON object", self.path)
            return None
        return {str(key): str(value) for key, value in data.items()}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        tmp_path.replace(self.path)
