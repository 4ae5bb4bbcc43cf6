"""User settings stored as JSON under the XDG config directory."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from reclaim.utils import xdg_config_home

log = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "settings.json"

DEFAULTS: dict[str, Any] = {
    "interactive": {"min_size_bytes": 1024 * 1024},
    "summary": {"top_count": 20},
    "progress": {"interval_ms": 80},
}


def default_settings_path() -> Path:
    return xdg_config_home() / "reclaim" / SETTINGS_FILE_NAME


class Settings:
    """Settings file with built-in defaults.

    Keys are dotted paths into nested sections, e.g. ``summary.top_count``.
    A key the file does not set falls back to :data:`DEFAULTS`. A missing
    or unreadable file behaves like an empty one.
    """

    _instance: Settings | None = None

    def __init__(self, path: Path | None = None) -> None:
        self._path = path if path is not None else default_settings_path()
        self._data = self._read()

    @classmethod
    def instance(cls) -> Settings:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        found, value = _lookup(self._data, key)
        if not found:
            found, value = _lookup(DEFAULTS, key)
        return value if found else default

    def get_int(self, key: str) -> int:
        """Read a non-negative integer, logging and using the default otherwise."""
        value = self.get(key)
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            return value
        log.warning("Ignoring invalid value for %s in %s: %r", key, self._path, value)
        return _lookup(DEFAULTS, key)[1]

    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key* and write the file."""
        *sections, name = key.split(".")
        target = self._data
        for section in sections:
            child = target.get(section)
            if not isinstance(child, dict):
                child = target[section] = {}
            target = child
        target[name] = value
        self._write()

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self._path, e)
            return {}
        if not isinstance(data, dict):
            log.warning("Ignoring settings in %s: expected a JSON object", self._path)
            return {}
        return data

    def _write(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, ensure_ascii=False)
                f.write("\n")
        except OSError:
            log.exception("Failed to save settings file: %s", self._path)


def _lookup(data: dict[str, Any], key: str) -> tuple[bool, Any]:
    node: Any = data
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return False, None
        node = node[part]
    return True, node
