"""Default configuration values for assetKeeper."""

from __future__ import annotations

from typing import Final

# The library document lives under ``<root>/<LIBRARY_DIR_NAME>/<LIBRARY_FILE_NAME>``
# unless the settings file points somewhere else.
LIBRARY_DIR_NAME: Final[str] = "AssetKeeper"
LIBRARY_FILE_NAME: Final[str] = "AssetLibrary.json"
SETTINGS_FILE_NAME: Final[str] = "settings.json"

DOCUMENT_SCHEMA: Final[str] = "assetKeeper/library@1"
DOCUMENT_VERSION: Final[str] = "1.0.0"

# ---------------------------------------------------------------------------
# Validation limits
# ---------------------------------------------------------------------------

NAME_MAX_LENGTH: Final[int] = 100
DESCRIPTION_MAX_LENGTH: Final[int] = 1000
AUTHOR_MAX_LENGTH: Final[int] = 50
TAG_MAX_LENGTH: Final[int] = 20
LARGE_FILE_THRESHOLD_BYTES: Final[int] = 2 * 1024 * 1024 * 1024

# Parent-chain walks give up after this many hops and report the chain as
# likely circular.
MAX_HIERARCHY_HOPS: Final[int] = 100

# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

# Upper bound on serialized snapshots waiting for the background writer.
# ``save`` blocks once the queue is full.
WRITE_QUEUE_MAX_SIZE: Final[int] = 32

# ---------------------------------------------------------------------------
# Search range presets
# ---------------------------------------------------------------------------

KIB: Final[int] = 1024
MIB: Final[int] = 1024 * 1024
SMALL_FILE_MAX_BYTES: Final[int] = 1 * MIB
MEDIUM_FILE_MAX_BYTES: Final[int] = 10 * MIB
LARGE_FILE_MAX_BYTES: Final[int] = 100 * MIB
