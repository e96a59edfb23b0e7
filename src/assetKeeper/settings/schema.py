"""Schema helpers for the application settings file."""

from __future__ import annotations

import os
from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import LARGE_FILE_THRESHOLD_BYTES, LIBRARY_FILE_NAME

_SORT_CHOICES = ["name", "created_date", "modified_date", "file_size", "author", "asset_type"]

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "assetKeeper/settings.schema.json",
    "type": "object",
    "required": ["schema", "library_file_name", "search", "validation"],
    "properties": {
        "schema": {"const": "assetKeeper/settings@1"},
        "library_root": {"type": ["string", "null"]},
        "library_file_name": {"type": "string", "minLength": 1},
        "search": {
            "type": "object",
            "properties": {
                "default_sort": {"type": "string", "enum": _SORT_CHOICES},
                "default_order": {"type": "string", "enum": ["ASC", "DESC"]},
                "case_sensitive": {"type": "boolean"},
            },
            "additionalProperties": True,
        },
        "validation": {
            "type": "object",
            "properties": {
                "large_file_threshold_bytes": {"type": "integer", "minimum": 1},
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "assetKeeper/settings@1",
    "library_root": None,
    "library_file_name": LIBRARY_FILE_NAME,
    "search": {
        "default_sort": "name",
        "default_order": "ASC",
        "case_sensitive": False,
    },
    "validation": {
        "large_file_threshold_bytes": LARGE_FILE_THRESHOLD_BYTES,
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)

_SECTIONS = ("search", "validation")


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in _SECTIONS and isinstance(value, dict):
                merged.setdefault(key, {}).update(value)
                continue
            if key == "library_root":
                if value in {None, ""}:
                    merged[key] = None
                    continue
                try:
                    merged[key] = os.fspath(value)
                except TypeError:
                    continue
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
