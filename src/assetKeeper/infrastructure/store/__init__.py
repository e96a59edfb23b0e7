from .library_store import JsonLibraryStore

__all__ = ["JsonLibraryStore"]
