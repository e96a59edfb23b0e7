from .search import SearchEngine, is_visible_in_list, sort_assets
from .statistics import LibraryStatistics
from .validation import ValidationEngine

__all__ = [
    "LibraryStatistics",
    "SearchEngine",
    "ValidationEngine",
    "is_visible_in_list",
    "sort_assets",
]
