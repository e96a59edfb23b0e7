from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..models import Library


@dataclass(frozen=True)
class LibraryStatistics:
    total_assets: int = 0
    favorite_count: int = 0
    group_count: int = 0
    archived_count: int = 0
    total_size_bytes: int = 0
    by_asset_type: Counter = field(default_factory=Counter)
    by_tag: Counter = field(default_factory=Counter)
    by_author: Counter = field(default_factory=Counter)

    @classmethod
    def from_library(cls, library: Library) -> LibraryStatistics:
        by_type: Counter = Counter()
        by_tag: Counter = Counter()
        by_author: Counter = Counter()
        favorites = groups = archived = total_size = 0

        for asset in library:
            metadata = asset.metadata
            if metadata.asset_type:
                by_type[metadata.asset_type] += 1
            if metadata.author_name:
                by_author[metadata.author_name] += 1
            by_tag.update(metadata.tags)
            favorites += asset.state.is_favorite
            groups += asset.state.is_group
            archived += asset.state.is_archived
            total_size += asset.file_info.file_size_bytes

        return cls(
            total_assets=len(library),
            favorite_count=favorites,
            group_count=groups,
            archived_count=archived,
            total_size_bytes=total_size,
            by_asset_type=by_type,
            by_tag=by_tag,
            by_author=by_author,
        )

    @property
    def most_common_asset_type(self) -> Optional[str]:
        common = self.by_asset_type.most_common(1)
        return common[0][0] if common else None

    @property
    def most_active_author(self) -> Optional[str]:
        common = self.by_author.most_common(1)
        return common[0][0] if common else None

    def top_tags(self, count: int = 10) -> List[Tuple[str, int]]:
        return self.by_tag.most_common(count)
