from __future__ import annotations

"""Persistence of the single user preference: the display theme."""

import logging
from pathlib import Path
from typing import Optional

import yaml

from classification_viewer.core.models import THEMES

logger = logging.getLogger(__name__)

__all__ = ["ThemeStore", "ThemeService", "DEFAULT_THEME"]

DEFAULT_THEME = "light"


class ThemeStore:
    """Read/write one string value under one key of a small YAML file.

    A missing or unreadable file reads as ``None``. Writes never raise; they
    return ``False`` when the value could not be persisted.
    """

    def __init__(self, path: Path, key: str = "theme") -> None:
        self.path = Path(path)
        self.key = key

    def read(self) -> Optional[str]:
        try:
            if not self.path.exists():
                return None
            data = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Could not read preferences %s: %s", self.path, exc)
            return None
        if not isinstance(data, dict):
            return None
        value = data.get(self.key)
        return value if isinstance(value, str) else None

    def write(self, value: str) -> bool:
        data: dict = {}
        try:
            if self.path.exists():
                loaded = yaml.safe_load(self.path.read_text(encoding="utf-8"))
                if isinstance(loaded, dict):
                    data = loaded
        except (OSError, yaml.YAMLError):
            data = {}
        data[self.key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(yaml.safe_dump(data, sort_keys=True), encoding="utf-8")
            return True
        except OSError as exc:
            logger.warning("Could not persist preference %s=%s: %s", self.key, value, exc)
            return False


class ThemeService:
    """Binary light/dark theme backed by a :class:`ThemeStore`."""

    def __init__(self, store: Optional[ThemeStore] = None, default: str = DEFAULT_THEME) -> None:
        self._store = store
        self._default = default if default in THEMES else DEFAULT_THEME
        self._theme = self._default

    @property
    def theme(self) -> str:
        return self._theme

    def load(self) -> str:
        """Restore the persisted theme, falling back to the default."""
        stored = self._store.read() if self._store is not None else None
        self._theme = stored if stored in THEMES else self._default
        return self._theme

    def set_theme(self, theme: str) -> bool:
        """Apply *theme* and persist it.

        Returns whether the preference was written; the in-memory theme is
        applied either way.

        Raises
        ------
        ValueError
            If *theme* is not ``"light"`` or ``"dark"``.
        """
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme!r} (expected one of {', '.join(THEMES)})")
        self._theme = theme
        if self._store is None:
            return False
        return self._store.write(theme)
