"""Mapping between the persisted JSON document and :class:`Library`."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from dateutil.parser import isoparse
from jsonschema import Draft202012Validator

from ...config import DOCUMENT_SCHEMA, DOCUMENT_VERSION
from ...domain.models import (
    Asset,
    AssetFileInfo,
    AssetId,
    AssetMetadata,
    AssetState,
    BoothItem,
    Library,
)
from ...errors import InvalidArgumentError, LibraryDocumentInvalidError
from ...utils.logging import get_logger

LOGGER = get_logger(__name__)

_STRING_LIST = {"type": "array", "items": {"type": "string"}}
_TIMESTAMP = {"type": ["string", "null"]}

LIBRARY_SCHEMA: dict[str, Any] = {
    "$id": "assetKeeper/library.schema.json",
    "type": "object",
    "required": ["assets"],
    "properties": {
        "schema": {"type": "string"},
        "version": {"type": "string"},
        "lastUpdated": _TIMESTAMP,
        "createdDate": _TIMESTAMP,
        "tags": _STRING_LIST,
        "assetTypes": _STRING_LIST,
        "assets": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["metadata"],
                "properties": {
                    "parentGroupId": {"type": ["string", "null"]},
                    "metadata": {
                        "type": "object",
                        "properties": {
                            "name": {"type": "string"},
                            "description": {"type": ["string", "null"]},
                            "authorName": {"type": ["string", "null"]},
                            "assetType": {"type": ["string", "null"]},
                            "tags": _STRING_LIST,
                            "dependencies": _STRING_LIST,
                            "createdDate": _TIMESTAMP,
                            "modifiedDate": _TIMESTAMP,
                        },
                    },
                    "fileInfo": {
                        "type": "object",
                        "properties": {
                            "filePath": {"type": ["string", "null"]},
                            "thumbnailPath": {"type": ["string", "null"]},
                            "fileSizeBytes": {"type": "integer"},
                            "importFiles": _STRING_LIST,
                        },
                    },
                    "state": {
                        "type": "object",
                        "properties": {
                            "isFavorite": {"type": "boolean"},
                            "isGroup": {"type": "boolean"},
                            "isArchived": {"type": "boolean"},
                        },
                    },
                    "boothItem": {"type": ["object", "null"]},
                    "lastAccessed": _TIMESTAMP,
                    "childAssetIds": _STRING_LIST,
                },
            },
        },
    },
    "additionalProperties": True,
}

_validator = Draft202012Validator(LIBRARY_SCHEMA)

_BOOTH_FIELDS = {
    "item_title": "itemTitle",
    "author_name": "authorName",
    "item_url": "itemUrl",
    "image_url": "imageUrl",
    "file_name": "fileName",
    "download_url": "downloadUrl",
    "price": "price",
    "description": "description",
}


def validate_document(data: Any) -> None:
    errors = sorted(_validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        first = errors[0]
        location = "/".join(str(part) for part in first.path) or "<root>"
        raise LibraryDocumentInvalidError(f"Library document invalid at {location}: {first.message}")


# ----------------------------------------------------------------------
# Timestamps
# ----------------------------------------------------------------------
def parse_timestamp(value: Optional[str], fallback: Optional[datetime]) -> Optional[datetime]:
    """Parse an ISO-8601 string into a naive local datetime."""

    if not value:
        return fallback
    try:
        parsed = isoparse(value)
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone().replace(tzinfo=None)
    except (ValueError, OverflowError, OSError):
        LOGGER.warning("Ignoring malformed timestamp %r", value)
        return fallback
    return parsed


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


# ----------------------------------------------------------------------
# Decoding
# ----------------------------------------------------------------------
def _optional_id(value: Optional[str], owner: str) -> Optional[AssetId]:
    if not value:
        return None
    parsed = AssetId.try_parse(value)
    if parsed is None:
        LOGGER.warning("Asset %s references malformed id %r; ignoring", owner, value)
    return parsed


def _decode_booth(raw: Optional[dict]) -> Optional[BoothItem]:
    if not raw:
        return None
    values = {}
    for attr, key in _BOOTH_FIELDS.items():
        value = raw.get(key)
        values[attr] = "" if value is None else str(value)
    return BoothItem(**values)


def decode_asset(asset_id: AssetId, raw: dict, now: datetime) -> Asset:
    meta = raw.get("metadata") or {}
    created = parse_timestamp(meta.get("createdDate"), now)
    modified = parse_timestamp(meta.get("modifiedDate"), created)
    file_info = raw.get("fileInfo") or {}
    state = raw.get("state") or {}

    size = file_info.get("fileSizeBytes") or 0
    if size < 0:
        LOGGER.warning("Asset %s has negative size %d; treating as 0", asset_id, size)
        size = 0

    children: List[AssetId] = []
    for child in raw.get("childAssetIds") or []:
        child_id = _optional_id(child, str(asset_id))
        if child_id is not None:
            children.append(child_id)

    return Asset(
        asset_id=asset_id,
        metadata=AssetMetadata(
            name=meta.get("name") or "",
            description=meta.get("description") or "",
            author_name=meta.get("authorName") or "",
            asset_type=meta.get("assetType") or "",
            tags=tuple(meta.get("tags") or ()),
            dependencies=tuple(meta.get("dependencies") or ()),
            created_date=created,
            modified_date=modified,
        ),
        file_info=AssetFileInfo(
            file_path=file_info.get("filePath") or "",
            thumbnail_path=file_info.get("thumbnailPath") or "",
            file_size_bytes=size,
            import_files=tuple(file_info.get("importFiles") or ()),
        ),
        state=AssetState(
            is_favorite=bool(state.get("isFavorite", False)),
            is_group=bool(state.get("isGroup", False)),
            is_archived=bool(state.get("isArchived", False)),
        ),
        booth_item=_decode_booth(raw.get("boothItem")),
        parent_group_id=_optional_id(raw.get("parentGroupId"), str(asset_id)),
        child_asset_ids=tuple(children),
        last_accessed=parse_timestamp(raw.get("lastAccessed"), None),
    )


def decode_library(data: Any, now: datetime) -> Library:
    """Build a Library from a parsed document; raises LibraryDocumentInvalidError."""

    validate_document(data)
    assets: Dict[AssetId, Asset] = {}
    for key, raw in data["assets"].items():
        try:
            asset_id = AssetId.parse(key)
        except InvalidArgumentError:
            LOGGER.warning("Skipping asset with malformed id %r", key)
            continue
        assets[asset_id] = decode_asset(asset_id, raw, now)

    created = parse_timestamp(data.get("createdDate"), now)
    return Library(
        assets=assets,
        last_updated=parse_timestamp(data.get("lastUpdated"), now),
        created_date=created,
        tags=tuple(data.get("tags") or ()),
        asset_types=tuple(data.get("assetTypes") or ()),
    )


# ----------------------------------------------------------------------
# Encoding
# ----------------------------------------------------------------------
def _encode_booth(item: Optional[BoothItem]) -> Optional[dict]:
    if item is None:
        return None
    return {key: getattr(item, attr) for attr, key in _BOOTH_FIELDS.items()}


def encode_asset(asset: Asset, children: List[AssetId]) -> dict:
    meta = asset.metadata
    info = asset.file_info
    return {
        "parentGroupId": str(asset.parent_group_id) if asset.parent_group_id else "",
        "metadata": {
            "name": meta.name,
            "description": meta.description,
            "authorName": meta.author_name,
            "assetType": meta.asset_type,
            "tags": list(meta.tags),
            "dependencies": list(meta.dependencies),
            "createdDate": format_timestamp(meta.created_date),
            "modifiedDate": format_timestamp(meta.modified_date),
        },
        "fileInfo": {
            "filePath": info.file_path,
            "thumbnailPath": info.thumbnail_path,
            "fileSizeBytes": info.file_size_bytes,
            "importFiles": list(info.import_files),
        },
        "state": {
            "isFavorite": asset.state.is_favorite,
            "isGroup": asset.state.is_group,
            "isArchived": asset.state.is_archived,
        },
        "boothItem": _encode_booth(asset.booth_item),
        "lastAccessed": format_timestamp(asset.last_accessed),
        # Rewritten from the child->parent index so the two never disagree on disk.
        "childAssetIds": [str(child) for child in children],
    }


def encode_library(library: Library) -> dict:
    return {
        "schema": DOCUMENT_SCHEMA,
        "version": DOCUMENT_VERSION,
        "createdDate": format_timestamp(library.created_date),
        "lastUpdated": format_timestamp(library.last_updated),
        "assets": {
            str(asset_id): encode_asset(asset, list(library.children_of(asset_id)))
            for asset_id, asset in library.assets.items()
        },
        "tags": list(library.tags),
        "assetTypes": list(library.asset_types),
    }
