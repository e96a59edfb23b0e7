from .filesystem import LocalFileSystem
from .store import JsonLibraryStore

__all__ = ["JsonLibraryStore", "LocalFileSystem"]
