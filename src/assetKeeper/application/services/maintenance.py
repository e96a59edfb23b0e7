import logging
from dataclasses import dataclass
from typing import List

from assetKeeper.domain.models import Asset, Library

from .catalog import AssetCatalog


@dataclass(frozen=True)
class OptimizeReport:
    tags_added: int = 0
    asset_types_added: int = 0
    tags_removed: int = 0
    asset_types_removed: int = 0
    dangling_parents_cleared: int = 0
    dangling_children_dropped: int = 0

    @property
    def total_changes(self) -> int:
        return (
            self.tags_added
            + self.asset_types_added
            + self.tags_removed
            + self.asset_types_removed
            + self.dangling_parents_cleared
            + self.dangling_children_dropped
        )


def _used_tags(library: Library) -> List[str]:
    seen: List[str] = []
    for asset in library:
        for tag in asset.metadata.tags:
            if tag.strip() and tag not in seen:
                seen.append(tag)
    return seen


def _used_asset_types(library: Library) -> List[str]:
    seen: List[str] = []
    for asset in library:
        asset_type = asset.metadata.asset_type
        if asset_type.strip() and asset_type not in seen:
            seen.append(asset_type)
    return seen


class LibraryMaintenance:
    """Registry synchronisation and clean-up passes over a catalog."""

    def __init__(self, catalog: AssetCatalog):
        self._catalog = catalog
        self._logger = logging.getLogger(__name__)

    def synchronize_tags(self) -> int:
        library = self._catalog.snapshot()
        missing = [t for t in _used_tags(library) if t not in library.tags]
        if missing:
            self._catalog.commit(library.with_tags(library.tags + tuple(missing)))
            self._logger.info(f"Registered {len(missing)} tags from assets")
        return len(missing)

    def synchronize_asset_types(self) -> int:
        library = self._catalog.snapshot()
        missing = [t for t in _used_asset_types(library) if t not in library.asset_types]
        if missing:
            self._catalog.commit(library.with_asset_types(library.asset_types + tuple(missing)))
            self._logger.info(f"Registered {len(missing)} asset types from assets")
        return len(missing)

    def cleanup_unused_tags(self) -> int:
        library = self._catalog.snapshot()
        used = set(_used_tags(library))
        kept = [t for t in library.tags if t in used]
        removed = len(library.tags) - len(kept)
        if removed:
            self._catalog.commit(library.with_tags(kept))
            self._logger.info(f"Removed {removed} unused tags")
        return removed

    def cleanup_unused_asset_types(self) -> int:
        library = self._catalog.snapshot()
        used = set(_used_asset_types(library))
        kept = [t for t in library.asset_types if t in used]
        removed = len(library.asset_types) - len(kept)
        if removed:
            self._catalog.commit(library.with_asset_types(kept))
            self._logger.info(f"Removed {removed} unused asset types")
        return removed

    def repair_hierarchy(self) -> tuple:
        """Clear parent links and child ids that point at missing assets."""
        library = self._catalog.snapshot()
        parents_cleared = 0
        children_dropped = 0
        updated: List[Asset] = []
        for asset in library:
            repaired = asset
            if asset.parent_group_id is not None and asset.parent_group_id not in library:
                repaired = repaired.with_parent(None)
                parents_cleared += 1
            valid_children = [c for c in asset.child_asset_ids if c in library]
            if len(valid_children) != len(asset.child_asset_ids):
                children_dropped += len(asset.child_asset_ids) - len(valid_children)
                repaired = repaired.with_children(valid_children)
            if repaired is not asset:
                updated.append(repaired)
        if updated:
            self._catalog.commit(library.with_assets(updated))
            self._logger.info(
                f"Repaired hierarchy: {parents_cleared} parents cleared, {children_dropped} child ids dropped"
            )
        return parents_cleared, children_dropped

    def optimize(self) -> OptimizeReport:
        self._logger.info("Starting library optimization")
        tags_added = self.synchronize_tags()
        types_added = self.synchronize_asset_types()
        tags_removed = self.cleanup_unused_tags()
        types_removed = self.cleanup_unused_asset_types()
        parents_cleared, children_dropped = self.repair_hierarchy()
        report = OptimizeReport(
            tags_added=tags_added,
            asset_types_added=types_added,
            tags_removed=tags_removed,
            asset_types_removed=types_removed,
            dangling_parents_cleared=parents_cleared,
            dangling_children_dropped=children_dropped,
        )
        self._logger.info(f"Library optimization finished ({report.total_changes} changes)")
        return report
