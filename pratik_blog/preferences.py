"""Persisted theme preference (a single "dark"/"light" value under a fixed key)."""

import json
from collections.abc import Callable
from pathlib import Path

from pratik_blog.config import settings
from pratik_blog.utils.logging import get_logger

logger = get_logger(__name__)

THEME_KEY = "theme"


def system_prefers_dark() -> bool:
    """Stand-in for the OS colour-scheme query; configured via PREFERS_COLOR_SCHEME."""
    return settings.prefers_color_scheme.strip().lower() == "dark"


class ThemePreference:
    def __init__(self, path: str | Path | None = None, key: str = THEME_KEY):
        self.path = Path(path or settings.preferences_path)
        self.key = key

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("preferences_read_failed", path=str(self.path), error=str(exc))
            return {}
        return data if isinstance(data, dict) else {}

    def load(self, system_default: Callable[[], bool] = system_prefers_dark) -> bool:
        """Stored value if present, otherwise whatever the system default reports."""
        stored = self._read().get(self.key)
        if stored in ("dark", "light"):
            return stored == "dark"
        return system_default()

    def save(self, is_dark: bool) -> None:
        data = self._read()
        data[self.key] = "dark" if is_dark else "light"
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def toggle(self, system_default: Callable[[], bool] = system_prefers_dark) -> bool:
        is_dark = not self.load(system_default)
        self.save(is_dark)
        logger.info("theme_toggled", theme="dark" if is_dark else "light")
        return is_dark
