"""User settings for Dustpan, stored as JSON under the XDG config dir."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable

from dustpan.utils import xdg_config_home

log = logging.getLogger(__name__)

_SETTINGS_DIR = "dustpan"
_SETTINGS_FILE = "settings.json"


def _check_temp_dir(value: Any) -> str | None:
    if not isinstance(value, str) or not value.strip():
        return "expected a non-empty path string"
    return None


def _check_browsers(value: Any) -> str | None:
    if not isinstance(value, list) or not all(isinstance(b, str) for b in value):
        return "expected a list of browser names"
    return None


# Known keys and the check each stored value must pass.
_CHECKS: dict[str, Callable[[Any], str | None]] = {
    "temp_dir": _check_temp_dir,
    "browsers": _check_browsers,
}


class Settings:
    """Persistent settings backed by a JSON file.

    Two keys mean something to Dustpan:

    * ``temp_dir``: path used instead of the system temp directory.
    * ``browsers``: names of the browsers whose caches get cleared
      (``chrome``, ``firefox``, ``safari``, ``chromium``, ``brave``,
      ``edge``); absent means all of them.

    Use :meth:`temp_dir` and :meth:`browsers` to read them.  A stored value
    of the wrong type is logged and treated as unset, so a hand-edited file
    never stops a cleanup.  Other keys are kept as-is and reachable through
    dot-notation :meth:`get` / :meth:`set`.
    """

    _instance: Settings | None = None

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or (xdg_config_home() / _SETTINGS_DIR / _SETTINGS_FILE)
        self._data: dict[str, Any] = {}
        self._load()

    @classmethod
    def instance(cls) -> Settings:
        """Return the singleton settings instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @staticmethod
    def validate(key: str, value: Any) -> None:
        """Check a value for a known key before it is stored.

        Raises:
            ValueError: If *key* is known and *value* has the wrong shape.
        """
        check = _CHECKS.get(key)
        problem = check(value) if check else None
        if problem:
            raise ValueError(f"Invalid value for {key!r}: {problem}, got {value!r}")

    @property
    def path(self) -> Path:
        return self._path

    def temp_dir(self) -> Path | None:
        """The temp root override, or None when unset or malformed."""
        value = self._checked("temp_dir")
        return Path(value).expanduser() if value is not None else None

    def browsers(self) -> tuple[str, ...] | None:
        """The browser allow-list, or None for every browser."""
        value = self._checked("browsers")
        return tuple(b.strip().lower() for b in value) if value is not None else None

    def as_dict(self) -> dict[str, Any]:
        """Return a copy of all stored settings."""
        return json.loads(json.dumps(self._data))

    def get(self, key: str, default: Any = None) -> Any:
        """Get a raw value by dot-notation key."""
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Validate, set a value by dot-notation key and persist to disk.

        Raises:
            ValueError: If the value is invalid for a known key.
        """
        self.validate(key, value)
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            if part not in node or not isinstance(node[part], dict):
                node[part] = {}
            node = node[part]
        node[parts[-1]] = value
        self._save()

    def _checked(self, key: str) -> Any:
        value = self.get(key)
        if value is None:
            return None
        try:
            self.validate(key, value)
        except ValueError as e:
            log.warning("Ignoring setting from %s: %s", self._path, e)
            return None
        return value

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self._path, e)
            return
        if not isinstance(data, dict):
            log.warning("Ignoring settings in %s: expected a JSON object", self._path)
            return
        self._data = data

    def _save(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(self._data, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            log.warning("Could not save settings to %s: %s", self._path, e)
