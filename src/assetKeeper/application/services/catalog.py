import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Union

from assetKeeper.domain.models import Asset, AssetId, Library
from assetKeeper.domain.repositories import ILibraryStore
from assetKeeper.domain.services import hierarchy
from assetKeeper.errors import (
    AssetAlreadyExistsError,
    AssetNotFoundError,
    IntegrityViolationError,
    InvalidArgumentError,
)

IdLike = Union[AssetId, str]


class AssetCatalog:
    """
    Typed CRUD over the asset map of one library document.
    Every mutation loads the current snapshot, derives a new Library value and
    writes the whole document back through the store.
    """

    def __init__(self, store: ILibraryStore, library_path: Path, clock: Callable[[], datetime] = datetime.now):
        self._store = store
        self._path = Path(library_path)
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    @property
    def library_path(self) -> Path:
        return self._path

    def set_library_path(self, path: Path) -> None:
        self._path = Path(path)

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------
    # Snapshot access
    # ------------------------------------------------------------------
    def snapshot(self) -> Library:
        return self._store.load(self._path)

    def commit(self, library: Library) -> bool:
        return self._store.save(library, self._path)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------
    def add(self, asset: Asset) -> Asset:
        """Store *asset*; an existing id is overwritten rather than rejected."""
        _require_name(asset)
        library = self.snapshot()
        _check_parent(library, asset)
        if asset.asset_id in library:
            self._logger.warning(f"Asset {asset.asset_id} already exists; overwriting")
        self.commit(library.with_asset(asset))
        self._logger.info(f"Added asset '{asset.name}' ({asset.asset_id})")
        return asset

    def insert(self, asset: Asset) -> Asset:
        """Strict variant of :meth:`add`."""
        _require_name(asset)
        library = self.snapshot()
        if asset.asset_id in library:
            raise AssetAlreadyExistsError(f"Asset already exists: {asset.asset_id}")
        _check_parent(library, asset)
        self.commit(library.with_asset(asset))
        self._logger.info(f"Inserted asset '{asset.name}' ({asset.asset_id})")
        return asset

    def update(self, asset: Asset) -> Asset:
        _require_name(asset)
        library = self.snapshot()
        if asset.asset_id not in library:
            raise AssetNotFoundError(f"Asset not found: {asset.asset_id}")
        _check_parent(library, asset)
        self.commit(library.with_asset(asset))
        self._logger.info(f"Updated asset '{asset.name}' ({asset.asset_id})")
        return asset

    def remove(self, asset_id: IdLike) -> Asset:
        asset_id = AssetId.parse(asset_id)
        library = self.snapshot()
        asset = library.get(asset_id)
        if asset is None:
            raise AssetNotFoundError(f"Asset not found: {asset_id}")
        self.commit(library.without_asset(asset_id))
        self._logger.info(f"Removed asset '{asset.name}' ({asset_id})")
        return asset

    def get(self, asset_id: IdLike) -> Optional[Asset]:
        parsed = AssetId.try_parse(asset_id)
        if parsed is None:
            return None
        return self.snapshot().get(parsed)

    def require(self, asset_id: IdLike) -> Asset:
        asset = self.get(asset_id)
        if asset is None:
            raise AssetNotFoundError(f"Asset not found: {asset_id}")
        return asset

    def get_all(self) -> List[Asset]:
        return self.snapshot().all()

    def count(self) -> int:
        return len(self.snapshot())

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def _where(self, predicate: Callable[[Asset], bool]) -> List[Asset]:
        return [asset for asset in self.snapshot() if predicate(asset)]

    def find_by_name(self, text: str) -> List[Asset]:
        needle = text.strip().casefold()
        return self._where(lambda a: needle in a.metadata.name.casefold())

    def find_by_description(self, text: str) -> List[Asset]:
        needle = text.strip().casefold()
        return self._where(lambda a: needle in a.metadata.description.casefold())

    def find_by_author(self, text: str) -> List[Asset]:
        needle = text.strip().casefold()
        return self._where(lambda a: needle in a.metadata.author_name.casefold())

    def by_author(self, author: str) -> List[Asset]:
        wanted = author.strip().casefold()
        return self._where(lambda a: a.metadata.author_name.casefold() == wanted)

    def by_tag(self, tag: str) -> List[Asset]:
        wanted = tag.strip()
        return self._where(lambda a: wanted in a.metadata.tags)

    def by_asset_type(self, asset_type: str) -> List[Asset]:
        wanted = asset_type.strip()
        return self._where(lambda a: a.metadata.asset_type == wanted)

    def favorites(self) -> List[Asset]:
        return self._where(lambda a: a.state.is_favorite)

    def archived(self) -> List[Asset]:
        return self._where(lambda a: a.state.is_archived)

    def visible(self) -> List[Asset]:
        return self._where(lambda a: not a.state.is_archived)

    def search_text(self, text: str) -> List[Asset]:
        """Name, description or author substring match."""
        needle = text.strip().casefold()
        return self._where(
            lambda a: needle in a.metadata.name.casefold()
            or needle in a.metadata.description.casefold()
            or needle in a.metadata.author_name.casefold()
        )

    def available_asset_types(self) -> List[str]:
        return sorted({a.metadata.asset_type for a in self.snapshot() if a.metadata.asset_type})

    def available_authors(self) -> List[str]:
        return sorted({a.metadata.author_name for a in self.snapshot() if a.metadata.author_name})

    # ------------------------------------------------------------------
    # Registries
    # ------------------------------------------------------------------
    def register_tag(self, tag: str) -> bool:
        library = self.snapshot()
        tag = (tag or "").strip()
        if not tag or tag in library.tags:
            return False
        return self.commit(library.with_tags(library.tags + (tag,)))

    def unregister_tag(self, tag: str) -> bool:
        library = self.snapshot()
        tag = (tag or "").strip()
        if tag not in library.tags:
            return False
        return self.commit(library.with_tags(t for t in library.tags if t != tag))

    def clear_tags(self) -> bool:
        return self.commit(self.snapshot().with_tags(()))

    def register_asset_type(self, asset_type: str) -> bool:
        library = self.snapshot()
        asset_type = (asset_type or "").strip()
        if not asset_type or asset_type in library.asset_types:
            return False
        return self.commit(library.with_asset_types(library.asset_types + (asset_type,)))

    def unregister_asset_type(self, asset_type: str) -> bool:
        library = self.snapshot()
        asset_type = (asset_type or "").strip()
        if asset_type not in library.asset_types:
            return False
        return self.commit(library.with_asset_types(t for t in library.asset_types if t != asset_type))

    def clear_asset_types(self) -> bool:
        return self.commit(self.snapshot().with_asset_types(()))


def _require_name(asset: Asset) -> None:
    # Unnamed groups are tolerated and reported by validation instead.
    if not asset.is_group and not asset.name.strip():
        raise InvalidArgumentError("Asset name must not be empty")


def _check_parent(library: Library, asset: Asset) -> None:
    parent_id = asset.parent_group_id
    stored = library.get(asset.asset_id)
    if parent_id is None or (stored is not None and stored.parent_group_id == parent_id):
        return
    parent = library.get(parent_id)
    if parent is None:
        raise IntegrityViolationError(f"Parent group not found: {parent_id}")
    if not parent.is_group:
        raise IntegrityViolationError(f"Asset {parent_id} is not a group")
    if hierarchy.would_create_cycle(library, parent_id, asset.asset_id):
        raise IntegrityViolationError(
            f"Moving {asset.asset_id} under {parent_id} would create a circular hierarchy"
        )
