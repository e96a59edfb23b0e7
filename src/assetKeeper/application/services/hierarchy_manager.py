import logging
from typing import List, Optional

from assetKeeper.config import MAX_HIERARCHY_HOPS
from assetKeeper.domain.models import Asset, AssetId
from assetKeeper.domain.services import hierarchy
from assetKeeper.errors import AssetNotFoundError, IntegrityViolationError

from .catalog import AssetCatalog, IdLike


class HierarchyManager:
    """Keeps the parent/child graph of a catalog a forest."""

    def __init__(self, catalog: AssetCatalog):
        self._catalog = catalog
        self._logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def would_create_cycle(self, parent_id: IdLike, child_id: IdLike) -> bool:
        return hierarchy.would_create_cycle(
            self._catalog.snapshot(), AssetId.parse(parent_id), AssetId.parse(child_id)
        )

    def max_depth(self, asset_id: IdLike, cap: int = MAX_HIERARCHY_HOPS) -> int:
        return hierarchy.max_depth(self._catalog.snapshot(), AssetId.parse(asset_id), cap)

    def root_assets(self) -> List[AssetId]:
        return hierarchy.root_assets(self._catalog.snapshot())

    def descendants(self, root_id: IdLike) -> List[AssetId]:
        return hierarchy.descendants(self._catalog.snapshot(), AssetId.parse(root_id))

    def ancestor_path(self, asset_id: IdLike) -> List[AssetId]:
        return hierarchy.ancestor_path(self._catalog.snapshot(), AssetId.parse(asset_id))

    def children(self, group_id: IdLike) -> List[AssetId]:
        return list(self._catalog.snapshot().children_of(AssetId.parse(group_id)))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create_group(self, name: str) -> Asset:
        group = Asset.create(name, is_group=True, at=self._catalog.now())
        self._catalog.add(group)
        self._logger.info(f"Created group '{group.name}' ({group.asset_id})")
        return group

    def add_to_group(self, child_id: IdLike, group_id: IdLike) -> None:
        child_id = AssetId.parse(child_id)
        group_id = AssetId.parse(group_id)
        library = self._catalog.snapshot()
        child = library.get(child_id)
        group = library.get(group_id)
        if child is None:
            raise AssetNotFoundError(f"Asset not found: {child_id}")
        if group is None:
            raise AssetNotFoundError(f"Group not found: {group_id}")

        if hierarchy.would_create_cycle(library, group_id, child_id):
            self._logger.warning(f"Rejected moving {child_id} under {group_id}: would create a cycle")
            raise IntegrityViolationError(
                f"Adding {child_id} to {group_id} would create a circular hierarchy"
            )
        if not group.is_group:
            self._logger.warning(f"Rejected moving {child_id} under {group_id}: target is not a group")
            raise IntegrityViolationError(f"Asset {group_id} is not a group")

        updated: List[Asset] = []
        previous = child.parent_group_id
        if previous is not None and previous != group_id:
            old_parent = library.get(previous)
            if old_parent is not None:
                updated.append(
                    old_parent.with_children(c for c in old_parent.child_asset_ids if c != child_id)
                )
        updated.append(child.with_parent(group_id))
        updated.append(group.with_children(list(library.children_of(group_id)) + [child_id]))
        self._catalog.commit(library.with_assets(updated))
        self._logger.info(f"Moved '{child.name}' into group '{group.name}'")

    def remove_from_group(self, child_id: IdLike) -> Optional[AssetId]:
        """Detach *child_id* from its parent; returns the former parent id."""
        child_id = AssetId.parse(child_id)
        library = self._catalog.snapshot()
        child = library.get(child_id)
        if child is None:
            raise AssetNotFoundError(f"Asset not found: {child_id}")
        previous = child.parent_group_id
        if previous is None:
            return None

        updated = [child.with_parent(None)]
        parent = library.get(previous)
        if parent is not None:
            updated.append(parent.with_children(c for c in parent.child_asset_ids if c != child_id))
        self._catalog.commit(library.with_assets(updated))
        self._logger.info(f"Removed '{child.name}' from group {previous}")
        return previous

    def disband(self, group_id: IdLike) -> List[AssetId]:
        """Release every child of *group_id*; the children themselves are kept."""
        group_id = AssetId.parse(group_id)
        library = self._catalog.snapshot()
        group = library.get(group_id)
        if group is None:
            raise AssetNotFoundError(f"Group not found: {group_id}")

        released = list(library.children_of(group_id))
        updated = [library.get(c).with_parent(None) for c in released]
        updated.append(group.with_children(()))
        self._catalog.commit(library.with_assets(updated))
        self._logger.info(f"Disbanded group '{group.name}' ({len(released)} children released)")
        return released
