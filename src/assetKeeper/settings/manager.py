"""Settings file management with validation and change notifications."""

from __future__ import annotations

import os
import sys
from copy import deepcopy
from pathlib import Path
from typing import Any, Optional

from jsonschema import ValidationError

from ..config import LIBRARY_DIR_NAME, SETTINGS_FILE_NAME
from ..errors import AssetKeeperError, SettingsLoadError, SettingsValidationError
from ..events.bus import EventBus
from ..events.library_events import SettingsChangedEvent
from ..utils.jsonio import read_json, write_json
from .schema import DEFAULT_SETTINGS, merge_with_defaults


def default_config_dir() -> Path:
    """Return the per-user assetKeeper directory for the current platform."""

    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / LIBRARY_DIR_NAME
        return Path.home() / "AppData" / "Roaming" / LIBRARY_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / LIBRARY_DIR_NAME
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / LIBRARY_DIR_NAME
    return Path.home() / ".config" / LIBRARY_DIR_NAME


def default_settings_path() -> Path:
    """Return the default settings.json location for the current platform."""

    return default_config_dir() / SETTINGS_FILE_NAME


class SettingsManager:
    """Load, validate and persist user settings for the application."""

    def __init__(self, path: Path | None = None, event_bus: Optional[EventBus] = None) -> None:
        self._path = path
        self._events = event_bus
        self._data: dict[str, Any] = deepcopy(DEFAULT_SETTINGS)

    @property
    def path(self) -> Path:
        return self._path or default_settings_path()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Load the settings JSON from disk, creating defaults if missing."""

        path = self.path
        self._path = path
        if path.exists():
            try:
                payload = read_json(path)
            except AssetKeeperError as exc:
                raise SettingsLoadError(str(exc)) from exc
        else:
            payload = None
        try:
            self._data = merge_with_defaults(payload)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        self._write()

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return the value for *key*, supporting dotted access for nested keys."""

        target = self._data
        parts = key.split(".")
        for index, part in enumerate(parts):
            if not isinstance(target, dict) or part not in target:
                return default
            value = target[part]
            if index == len(parts) - 1:
                return value
            target = value
        return default

    def set(self, key: str, value: Any) -> None:
        """Update *key* with *value* and persist the change."""

        if isinstance(value, Path):
            value = str(value)

        candidate = deepcopy(self._data)
        parts = key.split(".")
        target: dict[str, Any] = candidate
        for part in parts[:-1]:
            branch = target.get(part)
            if not isinstance(branch, dict):
                branch = {}
                target[part] = branch
            target = branch
        target[parts[-1]] = value
        try:
            self._data = merge_with_defaults(candidate)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        self._write()
        if self._events is not None:
            self._events.publish(SettingsChangedEvent(key=key, value=value))

    def library_path(self) -> Path:
        """Resolve ``<library_root or platform default>/<library_file_name>``."""

        root = self.get("library_root")
        base = Path(root).expanduser() if root else default_config_dir()
        return base / self.get("library_file_name")

    def as_dict(self) -> dict[str, Any]:
        return deepcopy(self._data)

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _write(self) -> None:
        path = self.path
        self._path = path
        path.parent.mkdir(parents=True, exist_ok=True)
        write_json(path, self._data)


__all__ = ["SettingsManager", "default_config_dir", "default_settings_path"]
