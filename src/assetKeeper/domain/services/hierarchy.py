"""Forest algorithms over a :class:`Library` snapshot.

Every walk keeps a visited set so it terminates even when the persisted
parent links are already corrupt.
"""

from __future__ import annotations

from collections import deque
from typing import List, Optional, Set

from assetKeeper.config import MAX_HIERARCHY_HOPS

from ..models import AssetId, Library


def would_create_cycle(library: Library, parent_id: AssetId, child_id: AssetId) -> bool:
    """Return ``True`` if making *child_id* a child of *parent_id* closes a loop."""

    if parent_id == child_id:
        return True

    visited: Set[AssetId] = set()
    current: Optional[AssetId] = parent_id
    while current is not None and current not in visited:
        if current == child_id:
            return True
        visited.add(current)
        asset = library.get(current)
        current = asset.parent_group_id if asset is not None else None
    return False


def max_depth(library: Library, asset_id: AssetId, cap: int = MAX_HIERARCHY_HOPS) -> int:
    """Depth of the subtree below *asset_id* (a leaf has depth 0)."""

    def _depth(current: AssetId, level: int, path: Set[AssetId]) -> int:
        if level >= cap:
            return level
        deepest = level
        for child_id in library.children_of(current):
            if child_id in path:
                continue
            deepest = max(deepest, _depth(child_id, level + 1, path | {child_id}))
        return deepest

    if asset_id not in library:
        return 0
    return _depth(asset_id, 0, {asset_id})


def root_assets(library: Library) -> List[AssetId]:
    return library.roots()


def descendants(library: Library, root_id: AssetId) -> List[AssetId]:
    """Breadth-first list of every asset below *root_id*, without duplicates."""

    result: List[AssetId] = []
    visited: Set[AssetId] = {root_id}
    queue = deque([root_id])
    while queue:
        current = queue.popleft()
        for child_id in library.children_of(current):
            if child_id in visited:
                continue
            visited.add(child_id)
            result.append(child_id)
            queue.append(child_id)
    return result


def ancestor_path(library: Library, asset_id: AssetId) -> List[AssetId]:
    """Ordered root-to-parent chain above *asset_id*."""

    path: List[AssetId] = []
    visited: Set[AssetId] = {asset_id}
    asset = library.get(asset_id)
    current = asset.parent_group_id if asset is not None else None
    while current is not None and current not in visited and current in library:
        visited.add(current)
        path.append(current)
        current = library.get(current).parent_group_id
    path.reverse()
    return path


def is_ancestor(library: Library, ancestor_id: AssetId, asset_id: AssetId) -> bool:
    return ancestor_id in ancestor_path(library, asset_id)
