from __future__ import annotations

"""Configuration loading and access helpers.

This module centralises all declarative settings (known classification
systems, viewer behaviour, logging). It loads YAML files packaged with
*classification_viewer* and merges them with user overrides.

On Windows: ``%LOCALAPPDATA%\\ClassificationViewer\\config\\*.yml``
On Unix: ``~/.classification_viewer/*.yml``

``CLASSVIEW_CONFIG_DIR`` replaces the user directory on every platform.
"""

import importlib.resources as pkg_resources
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

import yaml

from classification_viewer.core.exceptions import UnknownSystemError
from classification_viewer.core.models import SystemConfig

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager", "get_user_config_dir"]


def get_user_config_dir() -> Path:
    """Get the user configuration directory."""
    override = os.environ.get("CLASSVIEW_CONFIG_DIR")
    if override:
        return Path(override)
    if os.name == "nt":  # Windows
        local_appdata = os.environ.get("LOCALAPPDATA")
        if local_appdata:
            return Path(local_appdata) / "ClassificationViewer" / "config"
        return Path.home() / "AppData" / "Local" / "ClassificationViewer" / "config"
    return Path.home() / ".classification_viewer"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class _Singleton(type):
    _instance: "ConfigManager" | None = None

    def __call__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__call__(*args, **kwargs)
        return cls._instance

    def reset(cls) -> None:
        """Drop the cached instance so the next call reloads from disk."""
        cls._instance = None


class ConfigManager(metaclass=_Singleton):
    """Lazy-loads and exposes configuration sections as dictionaries."""

    _DEFAULT_FILENAMES = {
        "systems": "systems.yml",
        "viewer": "viewer.yml",
        "logging": "logging.yml",
    }

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Any]] = {}
        self._ensure_loaded()

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def get_systems(self) -> Dict[str, Any]:
        return self._data.get("systems", {})

    def get_viewer_settings(self) -> Dict[str, Any]:
        return self._data.get("viewer", {})

    def get_logging_config(self) -> Dict[str, Any]:
        return self._data.get("logging", {})

    def system_keys(self) -> List[str]:
        return list(self.get_systems().keys())

    def get_system_config(self, key: str) -> SystemConfig:
        """Return the configuration for *key* (case-insensitive).

        Raises
        ------
        UnknownSystemError
            If *key* is not a configured system.
        """
        systems = self.get_systems()
        normalized = (key or "").strip().lower()
        data = systems.get(normalized)
        if not isinstance(data, dict):
            raise UnknownSystemError(key, systems.keys())
        return SystemConfig.from_mapping(normalized, data)

    def search_debounce_ms(self) -> int:
        search = self.get_viewer_settings().get("search") or {}
        try:
            return int(search.get("debounce_ms", 200))
        except (TypeError, ValueError):
            return 200

    # ------------------------------------------------------------------
    # Internal loading logic
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if self._data:
            return  # already loaded

        startup_summary = []
        user_config_dir = get_user_config_dir()

        for key, filename in self._DEFAULT_FILENAMES.items():
            merged_cfg: Dict[str, Any] = {}
            status = "missing"

            # 1. load packaged default
            try:
                text = pkg_resources.files(__package__).joinpath(filename).read_text(encoding="utf-8")
                merged_cfg.update(yaml.safe_load(text) or {})
                status = "loaded"
            except (FileNotFoundError, OSError):
                logger.error("Missing packaged config for %s (%s)", key, filename)
            except yaml.YAMLError as exc:
                logger.error("Invalid packaged config for %s (%s): %s", key, filename, exc)
                status = "invalid"

            # 2. load user overrides
            user_path = user_config_dir / filename
            if user_path.exists():
                try:
                    user_data = yaml.safe_load(user_path.read_text(encoding="utf-8")) or {}
                    if isinstance(user_data, dict):
                        merged_cfg = _deep_merge(merged_cfg, user_data)
                        if status == "loaded":
                            status = "loaded+overrides"
                except (OSError, yaml.YAMLError) as exc:
                    logger.error("Could not parse user config %s: %s", user_path, exc)

            self._data[key] = merged_cfg
            startup_summary.append(f"{key}: {status}")

        logger.info("Config startup: %s", " | ".join(startup_summary))
