"""Light/dark theme preference."""

from dataclasses import dataclass
from enum import Enum

from calorie_tracker.domain.errors import ValidationError
from calorie_tracker.services.storage import THEME_KEY, KeyValueStore


class Theme(str, Enum):
    """Supported UI themes."""

    LIGHT = "light"
    DARK = "dark"


@dataclass
class ThemeService:
    """Service for the stored theme preference."""

    store: KeyValueStore

    def get_theme(self) -> Theme:
        """Return the stored theme or light when unset."""
        raw = self.store.get(THEME_KEY)
        try:
            return Theme(raw) if raw else Theme.LIGHT
        except ValueError:
            return Theme.LIGHT

    def set_theme(self, theme: str) -> Theme:
        """Persist a theme choice."""
        try:
            resolved = Theme(theme)
        except ValueError as exc:
            raise ValidationError(f"Unknown theme {theme!r}") from exc
        self.store.set(THEME_KEY, resolved.value)
        return resolved

    def toggle_theme(self) -> Theme:
        """Switch between light and dark and return the new theme."""
        current = self.get_theme()
        return self.set_theme(Theme.DARK if current is Theme.LIGHT else Theme.LIGHT)
