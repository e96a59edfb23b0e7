"""Helpers for JSON input/output with atomic writes."""

from __future__ import annotations

import json
import os
import time
from pathlib import Path
from typing import Any

from ..errors import LibraryDocumentInvalidError, LibraryIOError


def loads_json(text: str, *, source: Path | str = "<memory>") -> dict[str, Any]:
    """Parse *text* and return a JSON object."""

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LibraryDocumentInvalidError(f"Invalid JSON data in {source}: {exc}") from exc
    if not isinstance(data, dict):
        raise LibraryDocumentInvalidError(f"Expected a JSON object in {source}")
    return data


def dumps_json(data: dict[str, Any]) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True)


def read_json(path: Path) -> dict[str, Any]:
    """Read JSON from *path* and return a dictionary."""

    try:
        with path.open("r", encoding="utf-8") as handle:
            text = handle.read()
    except FileNotFoundError as exc:
        raise LibraryIOError(f"JSON file not found: {path}") from exc
    except OSError as exc:
        raise LibraryIOError(f"Unable to read {path}: {exc}") from exc
    return loads_json(text, source=path)


def atomic_write_text(path: Path, data: str) -> None:
    """Atomically write *data* into *path*."""

    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp_path.open("w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
    except (OSError, UnicodeError) as exc:
        tmp_path.unlink(missing_ok=True)
        raise LibraryIOError(f"Unable to write {path}: {exc}") from exc

    # Windows may briefly lock the destination (antivirus, indexers); retry
    # with a short back-off before giving up. The old file is never removed.
    for attempt in range(5):
        try:
            tmp_path.replace(path)
            return
        except PermissionError as exc:
            if attempt == 4:
                tmp_path.unlink(missing_ok=True)
                raise LibraryIOError(f"Unable to replace {path}: {exc}") from exc
            time.sleep(0.05 * (attempt + 1))
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise LibraryIOError(f"Unable to replace {path}: {exc}") from exc


def write_json(path: Path, data: dict[str, Any]) -> None:
    """Write *data* into *path* atomically."""

    atomic_write_text(path, dumps_json(data))
