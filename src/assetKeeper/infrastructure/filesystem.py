from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

from ..domain.repositories import FileMetadata, IFileSystem
from ..errors import LibraryIOError
from ..utils.jsonio import atomic_write_text


class LocalFileSystem(IFileSystem):
    """IFileSystem backed by the local disk."""

    def exists(self, path: Path) -> bool:
        return Path(path).is_file()

    def read_text(self, path: Path) -> str:
        try:
            return Path(path).read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise LibraryIOError(f"File not found: {path}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise LibraryIOError(f"Unable to read {path}: {exc}") from exc

    def write_text(self, path: Path, data: str) -> None:
        atomic_write_text(Path(path), data)

    def stat(self, path: Path) -> Optional[FileMetadata]:
        path = Path(path)
        try:
            info = path.stat()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise LibraryIOError(f"Unable to stat {path}: {exc}") from exc
        return FileMetadata(
            path=path,
            size_bytes=info.st_size,
            modified_at=datetime.fromtimestamp(info.st_mtime),
        )
