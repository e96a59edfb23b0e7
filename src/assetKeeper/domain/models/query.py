from __future__ import annotations

import sys
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum, Flag
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from assetKeeper.config import KIB, LARGE_FILE_MAX_BYTES, MEDIUM_FILE_MAX_BYTES, MIB, SMALL_FILE_MAX_BYTES

from .core import AssetId


class SearchFields(Flag):
    NONE = 0
    NAME = 1
    DESCRIPTION = 2
    AUTHOR = 4
    TAGS = 8
    FILE_PATH = 16
    ASSET_TYPE = 32
    ALL = NAME | DESCRIPTION | AUTHOR | TAGS | FILE_PATH | ASSET_TYPE


class SortOrder(Enum):
    ASC = "ASC"
    DESC = "DESC"


class SortCriteria(Enum):
    NAME = "name"
    CREATED_DATE = "created_date"
    MODIFIED_DATE = "modified_date"
    FILE_SIZE = "file_size"
    AUTHOR = "author"
    ASSET_TYPE = "asset_type"


class LogicalOperator(Enum):
    AND = "AND"
    OR = "OR"


_MAX_SIZE = sys.maxsize


@dataclass(frozen=True)
class DateRange:
    """Inclusive datetime window; a disabled range matches every value."""

    start: datetime = datetime.min
    end: datetime = datetime.max
    enabled: bool = True

    def __post_init__(self):
        # An inverted window can never be enabled.
        if self.enabled and self.start > self.end:
            object.__setattr__(self, "enabled", False)

    def contains(self, value: datetime) -> bool:
        if not self.enabled:
            return True
        return self.start <= value <= self.end

    @classmethod
    def disabled(cls) -> DateRange:
        return cls(datetime.min, datetime.max, enabled=False)

    @classmethod
    def last_days(cls, days: int, now: Optional[datetime] = None) -> DateRange:
        end = now or datetime.now()
        return cls(end - timedelta(days=days), end)

    @classmethod
    def last_months(cls, months: int, now: Optional[datetime] = None) -> DateRange:
        end = now or datetime.now()
        return cls(end - relativedelta(months=months), end)

    @classmethod
    def last_years(cls, years: int, now: Optional[datetime] = None) -> DateRange:
        end = now or datetime.now()
        return cls(end - relativedelta(years=years), end)

    @classmethod
    def today(cls, now: Optional[datetime] = None) -> DateRange:
        start = _midnight(now)
        return cls(start, start + timedelta(days=1) - timedelta(microseconds=1))

    @classmethod
    def this_week(cls, now: Optional[datetime] = None) -> DateRange:
        """Week window starting on Sunday."""
        today = _midnight(now)
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        return cls(start, start + timedelta(days=7) - timedelta(microseconds=1))

    @classmethod
    def this_month(cls, now: Optional[datetime] = None) -> DateRange:
        start = _midnight(now).replace(day=1)
        return cls(start, start + relativedelta(months=1) - timedelta(microseconds=1))

    @classmethod
    def this_year(cls, now: Optional[datetime] = None) -> DateRange:
        start = _midnight(now).replace(month=1, day=1)
        return cls(start, start + relativedelta(years=1) - timedelta(microseconds=1))


def _midnight(now: Optional[datetime]) -> datetime:
    return (now or datetime.now()).replace(hour=0, minute=0, second=0, microsecond=0)


@dataclass(frozen=True)
class FileSizeRange:
    """Inclusive byte-size window; a disabled range matches every value."""

    min_bytes: int = 0
    max_bytes: int = _MAX_SIZE
    enabled: bool = True

    def __post_init__(self):
        if self.enabled and self.min_bytes > self.max_bytes:
            object.__setattr__(self, "enabled", False)

    def contains(self, size: int) -> bool:
        if not self.enabled:
            return True
        return self.min_bytes <= size <= self.max_bytes

    @classmethod
    def disabled(cls) -> FileSizeRange:
        return cls(0, _MAX_SIZE, enabled=False)

    @classmethod
    def small(cls) -> FileSizeRange:
        return cls(0, SMALL_FILE_MAX_BYTES - 1)

    @classmethod
    def medium(cls) -> FileSizeRange:
        return cls(SMALL_FILE_MAX_BYTES, MEDIUM_FILE_MAX_BYTES - 1)

    @classmethod
    def large(cls) -> FileSizeRange:
        return cls(MEDIUM_FILE_MAX_BYTES, LARGE_FILE_MAX_BYTES - 1)

    @classmethod
    def very_large(cls) -> FileSizeRange:
        return cls(LARGE_FILE_MAX_BYTES, _MAX_SIZE)

    @classmethod
    def custom(cls, min_bytes: int, max_bytes: int) -> FileSizeRange:
        return cls(min_bytes, max_bytes)

    @classmethod
    def custom_kb(cls, min_kb: int, max_kb: int) -> FileSizeRange:
        return cls(min_kb * KIB, max_kb * KIB)

    @classmethod
    def custom_mb(cls, min_mb: int, max_mb: int) -> FileSizeRange:
        return cls(min_mb * MIB, max_mb * MIB)

    @classmethod
    def up_to(cls, max_bytes: int) -> FileSizeRange:
        return cls(0, max_bytes)

    @classmethod
    def at_least(cls, min_bytes: int) -> FileSizeRange:
        return cls(min_bytes, _MAX_SIZE)


@dataclass
class BasicSearchCriteria:
    """Single free-text query matched against a set of fields."""

    query: str = ""
    fields: SearchFields = SearchFields.ALL
    case_sensitive: bool = False
    use_regex: bool = False

    @property
    def has_query(self) -> bool:
        return bool(self.query and self.query.strip())


@dataclass
class AdvancedSearchCriteria:
    """Multi-condition query object - Fluent API for building filters"""

    name_query: str = ""
    description_query: str = ""
    author_query: str = ""
    tags: List[str] = field(default_factory=list)
    tag_operator: LogicalOperator = LogicalOperator.AND
    asset_types: List[str] = field(default_factory=list)
    asset_type_operator: LogicalOperator = LogicalOperator.OR
    created_range: DateRange = field(default_factory=DateRange.disabled)
    modified_range: DateRange = field(default_factory=DateRange.disabled)
    size_range: FileSizeRange = field(default_factory=FileSizeRange.disabled)
    favorites_only: bool = False
    exclude_groups: bool = True
    case_sensitive: bool = False
    combine: LogicalOperator = LogicalOperator.AND

    def add_tag(self, tag: str):
        tag = (tag or "").strip()
        if tag and tag not in self.tags:
            self.tags.append(tag)
        return self

    def remove_tag(self, tag: str):
        tag = (tag or "").strip()
        if tag in self.tags:
            self.tags.remove(tag)
        return self

    def clear_tags(self):
        self.tags = []
        return self

    def add_asset_type(self, asset_type: str):
        asset_type = (asset_type or "").strip()
        if asset_type and asset_type not in self.asset_types:
            self.asset_types.append(asset_type)
        return self

    def remove_asset_type(self, asset_type: str):
        asset_type = (asset_type or "").strip()
        if asset_type in self.asset_types:
            self.asset_types.remove(asset_type)
        return self

    def clear_asset_types(self):
        self.asset_types = []
        return self

    def only_favorites(self):
        self.favorites_only = True
        return self

    def include_groups(self):
        self.exclude_groups = False
        return self

    def created_within(self, date_range: DateRange):
        self.created_range = date_range
        return self

    def modified_within(self, date_range: DateRange):
        self.modified_range = date_range
        return self

    def sized_within(self, size_range: FileSizeRange):
        self.size_range = size_range
        return self

    def has_criteria(self) -> bool:
        return bool(
            self.name_query.strip()
            or self.description_query.strip()
            or self.author_query.strip()
            or self.tags
            or self.asset_types
            or self.created_range.enabled
            or self.modified_range.enabled
            or self.size_range.enabled
            or self.favorites_only
        )

    @classmethod
    def recently_added(cls, days: int = 7, now: Optional[datetime] = None) -> AdvancedSearchCriteria:
        return cls(created_range=DateRange.last_days(days, now))

    @classmethod
    def this_month(cls, now: Optional[datetime] = None) -> AdvancedSearchCriteria:
        return cls(created_range=DateRange.this_month(now))

    @classmethod
    def large_files_only(cls) -> AdvancedSearchCriteria:
        return cls(size_range=FileSizeRange.large())

    @classmethod
    def recent_large_files(cls, now: Optional[datetime] = None) -> AdvancedSearchCriteria:
        return cls(created_range=DateRange.last_days(30, now), size_range=FileSizeRange.large())


@dataclass
class SortSettings:
    primary: SortCriteria = SortCriteria.NAME
    primary_order: SortOrder = SortOrder.ASC
    secondary: SortCriteria = SortCriteria.CREATED_DATE
    secondary_order: SortOrder = SortOrder.DESC
    use_secondary: bool = False

    def then_by(self, criteria: SortCriteria, order: SortOrder = SortOrder.ASC):
        self.secondary = criteria
        self.secondary_order = order
        self.use_secondary = True
        return self


@dataclass
class SearchResult:
    """Ordered ids produced by one query, refinable in place."""

    asset_ids: List[AssetId] = field(default_factory=list)
    total_count: int = 0
    query: str = ""
    search_time: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)

    def __len__(self) -> int:
        return len(self.asset_ids)

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self.asset_ids

    @property
    def result_count(self) -> int:
        return len(self.asset_ids)

    @property
    def has_results(self) -> bool:
        return bool(self.asset_ids)

    def add_asset(self, asset_id: AssetId) -> None:
        if asset_id not in self.asset_ids:
            self.asset_ids.append(asset_id)
        self.total_count = len(self.asset_ids)

    def remove_asset(self, asset_id: AssetId) -> None:
        if asset_id in self.asset_ids:
            self.asset_ids.remove(asset_id)
        self.total_count = len(self.asset_ids)

    def contains(self, asset_id: AssetId) -> bool:
        return asset_id in self.asset_ids


@dataclass(frozen=True)
class SearchHistoryItem:
    query: str
    fields: SearchFields
    result_count: int
    timestamp: datetime = field(default_factory=datetime.now)
