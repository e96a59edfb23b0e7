from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from functools import cached_property
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from assetKeeper.errors import InvalidArgumentError


def _now() -> datetime:
    return datetime.now()


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _add_unique(items: Tuple[str, ...], value: str) -> Tuple[str, ...]:
    # Exact (case-sensitive) de-duplication; blank values are ignored.
    value = _clean(value)
    if not value or value in items:
        return items
    return items + (value,)


def _unique(values: Iterable[str]) -> Tuple[str, ...]:
    result: Tuple[str, ...] = ()
    for value in values:
        result = _add_unique(result, value)
    return result


@dataclass(frozen=True, order=True)
class AssetId:
    """Well-formed asset identifier (a lowercase hyphenated UUID)."""

    value: str

    def __post_init__(self):
        try:
            canonical = str(uuid.UUID(_clean(self.value)))
        except (ValueError, AttributeError, TypeError) as exc:
            raise InvalidArgumentError(f"Malformed asset id: {self.value!r}") from exc
        object.__setattr__(self, "value", canonical)

    @classmethod
    def new(cls) -> AssetId:
        return cls(str(uuid.uuid4()))

    @classmethod
    def parse(cls, value: Union[AssetId, str]) -> AssetId:
        if isinstance(value, AssetId):
            return value
        if not isinstance(value, str) or not value.strip():
            raise InvalidArgumentError("Asset id must be a non-empty string")
        return cls(value)

    @classmethod
    def try_parse(cls, value: Union[AssetId, str, None]) -> Optional[AssetId]:
        if value is None:
            return None
        try:
            return cls.parse(value)
        except InvalidArgumentError:
            return None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class AssetMetadata:
    name: str
    description: str = ""
    author_name: str = ""
    asset_type: str = ""
    tags: Tuple[str, ...] = ()
    dependencies: Tuple[str, ...] = ()
    created_date: datetime = field(default_factory=_now)
    modified_date: datetime = field(default_factory=_now)

    def _changed(self, at: Optional[datetime] = None, **changes) -> AssetMetadata:
        stamp = at or _now()
        # modified_date never falls behind created_date
        changes["modified_date"] = max(stamp, self.created_date)
        return replace(self, **changes)

    def with_name(self, name: str, at: Optional[datetime] = None) -> AssetMetadata:
        return self._changed(at, name=_clean(name))

    def with_description(self, description: str, at: Optional[datetime] = None) -> AssetMetadata:
        return self._changed(at, description=description or "")

    def with_author(self, author_name: str, at: Optional[datetime] = None) -> AssetMetadata:
        return self._changed(at, author_name=_clean(author_name))

    def with_asset_type(self, asset_type: str, at: Optional[datetime] = None) -> AssetMetadata:
        return self._changed(at, asset_type=_clean(asset_type))

    def with_tags(self, tags: Iterable[str], at: Optional[datetime] = None) -> AssetMetadata:
        return self._changed(at, tags=_unique(tags))

    def add_tag(self, tag: str, at: Optional[datetime] = None) -> AssetMetadata:
        tags = _add_unique(self.tags, tag)
        if tags == self.tags:
            return self
        return self._changed(at, tags=tags)

    def remove_tag(self, tag: str, at: Optional[datetime] = None) -> AssetMetadata:
        tag = _clean(tag)
        if tag not in self.tags:
            return self
        return self._changed(at, tags=tuple(t for t in self.tags if t != tag))

    def add_dependency(self, dependency: str, at: Optional[datetime] = None) -> AssetMetadata:
        dependencies = _add_unique(self.dependencies, dependency)
        if dependencies == self.dependencies:
            return self
        return self._changed(at, dependencies=dependencies)

    def remove_dependency(self, dependency: str, at: Optional[datetime] = None) -> AssetMetadata:
        dependency = _clean(dependency)
        if dependency not in self.dependencies:
            return self
        return self._changed(
            at, dependencies=tuple(d for d in self.dependencies if d != dependency)
        )

    def has_tag(self, tag: str, case_sensitive: bool = False) -> bool:
        if case_sensitive:
            return tag in self.tags
        lowered = tag.lower()
        return any(t.lower() == lowered for t in self.tags)


@dataclass(frozen=True)
class AssetFileInfo:
    file_path: str = ""
    thumbnail_path: str = ""
    file_size_bytes: int = 0
    import_files: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.file_size_bytes < 0:
            raise InvalidArgumentError(
                f"File size must not be negative (got {self.file_size_bytes})"
            )

    def with_file_path(self, file_path: str) -> AssetFileInfo:
        return replace(self, file_path=_clean(file_path))

    def with_thumbnail_path(self, thumbnail_path: str) -> AssetFileInfo:
        return replace(self, thumbnail_path=_clean(thumbnail_path))

    def with_size(self, file_size_bytes: int) -> AssetFileInfo:
        return replace(self, file_size_bytes=file_size_bytes)

    def with_import_files(self, import_files: Iterable[str]) -> AssetFileInfo:
        return replace(self, import_files=_unique(import_files))


@dataclass(frozen=True)
class AssetState:
    is_favorite: bool = False
    is_group: bool = False
    is_archived: bool = False

    def with_favorite(self, value: bool) -> AssetState:
        return replace(self, is_favorite=value)

    def with_archived(self, value: bool) -> AssetState:
        return replace(self, is_archived=value)

    def with_group(self, value: bool) -> AssetState:
        return replace(self, is_group=value)


@dataclass(frozen=True)
class BoothItem:
    """Marketplace provenance for an asset."""

    item_title: str = ""
    author_name: str = ""
    item_url: str = ""
    image_url: str = ""
    file_name: str = ""
    download_url: str = ""
    price: str = ""
    description: str = ""


@dataclass(frozen=True)
class Asset:
    """A catalogued item.

    ``parent_group_id`` is the authoritative hierarchy link. ``child_asset_ids``
    only records the preferred ordering of a group's children; the effective
    children are always read from :meth:`Library.children_of`.
    """

    asset_id: AssetId
    metadata: AssetMetadata
    file_info: AssetFileInfo = field(default_factory=AssetFileInfo)
    state: AssetState = field(default_factory=AssetState)
    booth_item: Optional[BoothItem] = None
    parent_group_id: Optional[AssetId] = None
    child_asset_ids: Tuple[AssetId, ...] = ()
    last_accessed: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        name: str,
        *,
        asset_type: str = "",
        tags: Iterable[str] = (),
        author_name: str = "",
        description: str = "",
        file_path: str = "",
        file_size_bytes: int = 0,
        is_group: bool = False,
        at: Optional[datetime] = None,
    ) -> Asset:
        stamp = at or _now()
        return cls(
            asset_id=AssetId.new(),
            metadata=AssetMetadata(
                name=_clean(name),
                description=description,
                author_name=_clean(author_name),
                asset_type=_clean(asset_type),
                tags=_unique(tags),
                created_date=stamp,
                modified_date=stamp,
            ),
            file_info=AssetFileInfo(file_path=_clean(file_path), file_size_bytes=file_size_bytes),
            state=AssetState(is_group=is_group),
        )

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def is_group(self) -> bool:
        return self.state.is_group

    @property
    def is_visible_in_list(self) -> bool:
        """Only top-level assets appear in flat listings."""
        return self.parent_group_id is None

    def with_metadata(self, metadata: AssetMetadata) -> Asset:
        return replace(self, metadata=metadata)

    def with_file_info(self, file_info: AssetFileInfo) -> Asset:
        return replace(self, file_info=file_info)

    def with_state(self, state: AssetState) -> Asset:
        return replace(self, state=state)

    def with_booth_item(self, booth_item: Optional[BoothItem]) -> Asset:
        return replace(self, booth_item=booth_item)

    def with_parent(self, parent_group_id: Optional[AssetId]) -> Asset:
        return replace(self, parent_group_id=parent_group_id)

    def with_children(self, child_asset_ids: Iterable[AssetId]) -> Asset:
        ordered: List[AssetId] = []
        for child_id in child_asset_ids:
            if child_id not in ordered:
                ordered.append(child_id)
        return replace(self, child_asset_ids=tuple(ordered))

    def touched(self, at: Optional[datetime] = None) -> Asset:
        return replace(self, last_accessed=at or _now())


@dataclass(frozen=True, eq=False)
class Library:
    """Aggregate root holding every asset plus the suggestion registries."""

    assets: Dict[AssetId, Asset] = field(default_factory=dict)
    last_updated: datetime = field(default_factory=_now)
    created_date: datetime = field(default_factory=_now)
    tags: Tuple[str, ...] = ()
    asset_types: Tuple[str, ...] = ()

    @classmethod
    def empty(cls, at: Optional[datetime] = None) -> Library:
        stamp = at or _now()
        return cls(last_updated=stamp, created_date=stamp)

    def __len__(self) -> int:
        return len(self.assets)

    def __iter__(self) -> Iterator[Asset]:
        return iter(self.assets.values())

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self.assets

    def get(self, asset_id: AssetId) -> Optional[Asset]:
        return self.assets.get(asset_id)

    def all(self) -> List[Asset]:
        return list(self.assets.values())

    @cached_property
    def _children_index(self) -> Dict[AssetId, Tuple[AssetId, ...]]:
        index: Dict[AssetId, List[AssetId]] = {}
        for asset in self.assets.values():
            parent_id = asset.parent_group_id
            if parent_id is not None and parent_id in self.assets:
                index.setdefault(parent_id, []).append(asset.asset_id)

        ordered: Dict[AssetId, Tuple[AssetId, ...]] = {}
        for parent_id, children in index.items():
            # Keep the group's recorded order, then append unrecorded children.
            recorded = [c for c in self.assets[parent_id].child_asset_ids if c in children]
            seen = set(recorded)
            tail = [c for c in children if c not in seen]
            ordered[parent_id] = tuple(dict.fromkeys(recorded + tail))
        return ordered

    def children_of(self, asset_id: AssetId) -> Tuple[AssetId, ...]:
        return self._children_index.get(asset_id, ())

    def roots(self) -> List[AssetId]:
        return [a.asset_id for a in self.assets.values() if a.parent_group_id is None]

    def with_asset(self, asset: Asset) -> Library:
        assets = dict(self.assets)
        assets[asset.asset_id] = asset
        return replace(self, assets=assets)

    def with_assets(self, updated: Iterable[Asset]) -> Library:
        assets = dict(self.assets)
        for asset in updated:
            assets[asset.asset_id] = asset
        return replace(self, assets=assets)

    def without_asset(self, asset_id: AssetId) -> Library:
        """Drop *asset_id*, detaching it from its parent and orphaning its children."""
        removed = self.assets.get(asset_id)
        if removed is None:
            return self
        assets = dict(self.assets)
        del assets[asset_id]
        parent = assets.get(removed.parent_group_id) if removed.parent_group_id else None
        if parent is not None:
            assets[parent.asset_id] = parent.with_children(
                c for c in parent.child_asset_ids if c != asset_id
            )
        for other_id, other in list(assets.items()):
            if other.parent_group_id == asset_id:
                assets[other_id] = other.with_parent(None)
        return replace(self, assets=assets)

    def with_tags(self, tags: Iterable[str]) -> Library:
        return replace(self, tags=_unique(tags))

    def with_asset_types(self, asset_types: Iterable[str]) -> Library:
        return replace(self, asset_types=_unique(asset_types))

    def touched(self, at: Optional[datetime] = None) -> Library:
        return replace(self, last_updated=at or _now())
