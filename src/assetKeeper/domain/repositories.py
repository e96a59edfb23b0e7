from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from .models import Library


@dataclass(frozen=True)
class FileMetadata:
    path: Path
    size_bytes: int
    modified_at: datetime


class IFileSystem(ABC):
    @abstractmethod
    def exists(self, path: Path) -> bool:
        pass

    @abstractmethod
    def read_text(self, path: Path) -> str:
        """Return the file content; raises LibraryIOError on failure"""
        pass

    @abstractmethod
    def write_text(self, path: Path, data: str) -> None:
        """Replace the file content atomically"""
        pass

    @abstractmethod
    def stat(self, path: Path) -> Optional[FileMetadata]:
        """Return size and mtime, or None when the file is missing"""
        pass


class ILibraryStore(ABC):
    @abstractmethod
    def load(self, path: Path) -> Library:
        """Return the library at *path*; never raises"""
        pass

    @abstractmethod
    def save(self, library: Library, path: Path) -> bool:
        """Stamp, cache and enqueue a write of *library*"""
        pass

    @abstractmethod
    def force_reload(self, path: Path) -> Library:
        pass

    @abstractmethod
    def exists(self, path: Path) -> bool:
        pass

    @abstractmethod
    def stat(self, path: Path) -> Optional[FileMetadata]:
        pass

    @abstractmethod
    def flush(self, timeout: Optional[float] = None) -> bool:
        """Block until every queued write has been attempted"""
        pass
