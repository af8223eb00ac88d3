"""Theme preference stored per browser."""

from collections.abc import MutableMapping
from enum import Enum
from typing import Any

THEME_KEY = "theme"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


def load_theme(storage: MutableMapping[str, Any]) -> Theme:
    """Return the stored theme, falling back to SYSTEM for missing or bad values."""
    try:
        return Theme(storage.get(THEME_KEY, Theme.SYSTEM.value))
    except ValueError:
        return Theme.SYSTEM


def save_theme(storage: MutableMapping[str, Any], theme: Theme) -> None:
    storage[THEME_KEY] = theme.value


def dark_mode_value(theme: Theme) -> bool | None:
    """Map a theme to ``ui.dark_mode`` (None follows the OS setting)."""
    if theme is Theme.DARK:
        return True
    if theme is Theme.LIGHT:
        return False
    return None
