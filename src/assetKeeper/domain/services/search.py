"""Linear-scan query evaluation over a :class:`Library` snapshot."""

from __future__ import annotations

import logging
import re
import time
from typing import Callable, Iterable, List, Optional

from ..models import (
    AdvancedSearchCriteria,
    Asset,
    AssetId,
    BasicSearchCriteria,
    Library,
    LogicalOperator,
    SearchFields,
    SearchResult,
    SortCriteria,
    SortOrder,
    SortSettings,
)

LOGGER = logging.getLogger(__name__)


def is_visible_in_list(asset: Asset) -> bool:
    """Flat listings only show assets that are not inside a group."""
    return asset.parent_group_id is None


_SORT_KEYS = {
    SortCriteria.NAME: lambda a: a.metadata.name.casefold(),
    SortCriteria.CREATED_DATE: lambda a: a.metadata.created_date,
    SortCriteria.MODIFIED_DATE: lambda a: a.metadata.modified_date,
    SortCriteria.FILE_SIZE: lambda a: a.file_info.file_size_bytes,
    SortCriteria.AUTHOR: lambda a: a.metadata.author_name.casefold(),
    SortCriteria.ASSET_TYPE: lambda a: a.metadata.asset_type.casefold(),
}


def sort_assets(assets: Iterable[Asset], settings: Optional[SortSettings] = None) -> List[Asset]:
    """Order *assets* by primary, then secondary criteria, then input order."""

    settings = settings or SortSettings()
    ordered = list(assets)
    # Python's sort is stable: sorting by the tie-break first and the primary
    # key last leaves equal primaries in secondary order.
    if settings.use_secondary:
        ordered.sort(
            key=_SORT_KEYS[settings.secondary],
            reverse=settings.secondary_order is SortOrder.DESC,
        )
    ordered.sort(
        key=_SORT_KEYS[settings.primary],
        reverse=settings.primary_order is SortOrder.DESC,
    )
    return ordered


class SearchEngine:
    def __init__(self, tags_case_sensitive: bool = False):
        self._tags_case_sensitive = tags_case_sensitive
        self._logger = LOGGER

    # ------------------------------------------------------------------
    # Basic search
    # ------------------------------------------------------------------
    def basic_search(
        self,
        library: Library,
        criteria: BasicSearchCriteria,
        sort: Optional[SortSettings] = None,
    ) -> SearchResult:
        started = time.perf_counter()
        matcher = self._text_matcher(criteria)
        matched = [
            asset
            for asset in library
            if is_visible_in_list(asset) and self._basic_match(asset, criteria, matcher)
        ]
        return self._result(matched, criteria.query, sort, started)

    def _text_matcher(self, criteria: BasicSearchCriteria) -> Callable[[str], bool]:
        query = criteria.query or ""
        if not criteria.has_query:
            return lambda text: True

        if criteria.use_regex:
            flags = 0 if criteria.case_sensitive else re.IGNORECASE
            try:
                pattern = re.compile(query, flags)
            except re.error as exc:
                self._logger.warning("Invalid search pattern %r: %s", query, exc)
                return lambda text: False
            return lambda text: pattern.search(text or "") is not None

        needle = query.strip()
        if criteria.case_sensitive:
            return lambda text: needle in (text or "")
        needle = needle.casefold()
        return lambda text: needle in (text or "").casefold()

    @staticmethod
    def _basic_match(asset: Asset, criteria: BasicSearchCriteria, matches: Callable[[str], bool]) -> bool:
        if not criteria.has_query:
            return True
        fields = criteria.fields
        metadata = asset.metadata
        if SearchFields.NAME in fields and matches(metadata.name):
            return True
        if SearchFields.DESCRIPTION in fields and matches(metadata.description):
            return True
        if SearchFields.AUTHOR in fields and matches(metadata.author_name):
            return True
        if SearchFields.TAGS in fields and any(matches(tag) for tag in metadata.tags):
            return True
        if SearchFields.FILE_PATH in fields and matches(asset.file_info.file_path):
            return True
        if SearchFields.ASSET_TYPE in fields and matches(metadata.asset_type):
            return True
        return False

    # ------------------------------------------------------------------
    # Advanced search
    # ------------------------------------------------------------------
    def advanced_search(
        self,
        library: Library,
        criteria: AdvancedSearchCriteria,
        sort: Optional[SortSettings] = None,
    ) -> SearchResult:
        started = time.perf_counter()
        matched = [
            asset
            for asset in library
            if is_visible_in_list(asset)
            and not (criteria.exclude_groups and asset.is_group)
            and self.matches_advanced(asset, criteria)
        ]
        return self._result(matched, self._describe(criteria), sort, started)

    def matches_advanced(self, asset: Asset, criteria: AdvancedSearchCriteria) -> bool:
        """Evaluate every populated sub-condition and combine them."""

        case_sensitive = criteria.case_sensitive or self._tags_case_sensitive
        metadata = asset.metadata
        checks: List[bool] = []

        def contains(query: str, text: str) -> bool:
            if criteria.case_sensitive:
                return query.strip() in (text or "")
            return query.strip().casefold() in (text or "").casefold()

        if criteria.name_query.strip():
            checks.append(contains(criteria.name_query, metadata.name))
        if criteria.description_query.strip():
            checks.append(contains(criteria.description_query, metadata.description))
        if criteria.author_query.strip():
            checks.append(contains(criteria.author_query, metadata.author_name))
        if criteria.tags:
            hits = [metadata.has_tag(tag, case_sensitive) for tag in criteria.tags]
            checks.append(all(hits) if criteria.tag_operator is LogicalOperator.AND else any(hits))
        if criteria.asset_types:
            actual = metadata.asset_type if case_sensitive else metadata.asset_type.casefold()
            hits = [
                actual == (wanted if case_sensitive else wanted.casefold())
                for wanted in criteria.asset_types
            ]
            checks.append(
                all(hits) if criteria.asset_type_operator is LogicalOperator.AND else any(hits)
            )
        if criteria.created_range.enabled:
            checks.append(criteria.created_range.contains(metadata.created_date))
        if criteria.modified_range.enabled:
            checks.append(criteria.modified_range.contains(metadata.modified_date))
        if criteria.size_range.enabled:
            checks.append(criteria.size_range.contains(asset.file_info.file_size_bytes))
        if criteria.favorites_only:
            checks.append(asset.state.is_favorite)

        if not checks:
            return True
        if criteria.combine is LogicalOperator.OR:
            return any(checks)
        return all(checks)

    @staticmethod
    def _describe(criteria: AdvancedSearchCriteria) -> str:
        parts = []
        for label, value in (
            ("name", criteria.name_query),
            ("description", criteria.description_query),
            ("author", criteria.author_query),
        ):
            if value.strip():
                parts.append(f"{label}:{value.strip()}")
        if criteria.tags:
            parts.append(f"tags[{criteria.tag_operator.value}]:{','.join(criteria.tags)}")
        if criteria.asset_types:
            parts.append(f"types[{criteria.asset_type_operator.value}]:{','.join(criteria.asset_types)}")
        return f" {criteria.combine.value} ".join(parts)

    # ------------------------------------------------------------------
    # Group listing
    # ------------------------------------------------------------------
    def group_children(
        self,
        library: Library,
        group_id: AssetId,
        sort: Optional[SortSettings] = None,
    ) -> SearchResult:
        """Direct children of *group_id*; the only way grouped assets surface."""
        started = time.perf_counter()
        children = [library.get(child_id) for child_id in library.children_of(group_id)]
        children = [child for child in children if child is not None]
        if sort is not None:
            children = sort_assets(children, sort)
        return self._build(children, str(group_id), started)

    def _result(self, matched: List[Asset], query: str, sort: Optional[SortSettings], started: float) -> SearchResult:
        return self._build(sort_assets(matched, sort), query, started)

    @staticmethod
    def _build(assets: List[Asset], query: str, started: float) -> SearchResult:
        ids = [asset.asset_id for asset in assets]
        return SearchResult(
            asset_ids=ids,
            total_count=len(ids),
            query=query,
            search_time=time.perf_counter() - started,
        )
