from .core import Asset, AssetFileInfo, AssetId, AssetMetadata, AssetState, BoothItem, Library
from .query import (
    AdvancedSearchCriteria,
    BasicSearchCriteria,
    DateRange,
    FileSizeRange,
    LogicalOperator,
    SearchFields,
    SearchHistoryItem,
    SearchResult,
    SortCriteria,
    SortOrder,
    SortSettings,
)
from .validation import ValidationFinding, ValidationLevel, ValidationReport

__all__ = [
    "AdvancedSearchCriteria",
    "Asset",
    "AssetFileInfo",
    "AssetId",
    "AssetMetadata",
    "AssetState",
    "BasicSearchCriteria",
    "BoothItem",
    "DateRange",
    "FileSizeRange",
    "Library",
    "LogicalOperator",
    "SearchFields",
    "SearchHistoryItem",
    "SearchResult",
    "SortCriteria",
    "SortOrder",
    "SortSettings",
    "ValidationFinding",
    "ValidationLevel",
    "ValidationReport",
]
