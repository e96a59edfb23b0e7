"""JSON-backed library store with a staleness-aware cache and a write queue."""

from __future__ import annotations

import os
import queue
import threading
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from ...config import WRITE_QUEUE_MAX_SIZE
from ...domain.models import Library
from ...domain.repositories import FileMetadata, IFileSystem, ILibraryStore
from ...errors import LibraryDocumentInvalidError, LibraryIOError
from ...events.bus import EventBus
from ...events.library_events import LibrarySavedEvent, LibrarySaveFailedEvent
from ...utils.jsonio import dumps_json, loads_json
from ...utils.logging import get_logger
from .codec import decode_library, encode_library

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class _WriteJob:
    path: Path
    payload: str
    library: Library
    asset_count: int


_STOP = object()


def _normalise(path: Path | str) -> Path:
    return Path(os.path.abspath(os.fspath(path)))


class JsonLibraryStore(ILibraryStore):
    """Load and save :class:`Library` documents.

    One lock guards the cache triple (library, path, recorded time). Saves
    update the cache synchronously and hand the serialized document to a
    single daemon worker through a bounded queue, so a ``load`` right after
    ``save`` always sees the new content. While writes for a path are still
    queued the cache is authoritative for that path.
    """

    def __init__(
        self,
        file_system: IFileSystem,
        clock: Callable[[], datetime] = datetime.now,
        max_pending: int = WRITE_QUEUE_MAX_SIZE,
        event_bus: Optional[EventBus] = None,
    ):
        self._fs = file_system
        self._clock = clock
        self._events = event_bus

        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._cached_library: Optional[Library] = None
        self._cached_path: Optional[Path] = None
        # None means "no file existed when cached"
        self._cached_time: Optional[datetime] = None
        self._pending: Counter = Counter()

        self._queue: "queue.Queue" = queue.Queue(maxsize=max_pending)
        self._worker: Optional[threading.Thread] = None

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------
    def load(self, path: Path) -> Library:
        path = _normalise(path)
        with self._lock:
            if self._cached_path == path and self._cached_library is not None:
                if self._is_unchanged(path):
                    LOGGER.debug("Library cache hit for %s", path)
                    return self._cached_library
            library, recorded = self._read(path)
            self._cached_library = library
            self._cached_path = path
            self._cached_time = recorded
            return library

    def force_reload(self, path: Path) -> Library:
        path = _normalise(path)
        with self._lock:
            if self._cached_path == path:
                self._cached_library = None
                self._cached_path = None
                self._cached_time = None
        return self.load(path)

    def _is_unchanged(self, path: Path) -> bool:
        if self._pending[path]:
            return True
        try:
            info = self._fs.stat(path)
        except LibraryIOError as exc:
            LOGGER.warning("Unable to stat %s: %s", path, exc)
            return False
        if info is None:
            # Nothing on disk can be newer than the cache.
            return True
        return self._cached_time is not None and info.modified_at <= self._cached_time

    def _read(self, path: Path) -> tuple[Library, Optional[datetime]]:
        now = self._clock()
        try:
            info = self._fs.stat(path)
            if info is None:
                LOGGER.warning("Library file %s not found; starting a new library", path)
                return Library.empty(now), None
            text = self._fs.read_text(path)
        except LibraryIOError as exc:
            LOGGER.error("Failed to read library %s: %s", path, exc)
            return Library.empty(now), None

        if not text.strip():
            LOGGER.warning("Library file %s is empty; starting a new library", path)
            return Library.empty(now), info.modified_at

        try:
            library = decode_library(loads_json(text, source=path), now)
        except LibraryDocumentInvalidError as exc:
            LOGGER.error("Failed to parse library %s: %s", path, exc)
            return Library.empty(now), info.modified_at
        except (TypeError, ValueError, KeyError, OverflowError) as exc:
            LOGGER.error("Failed to decode library %s: %s", path, exc)
            return Library.empty(now), info.modified_at
        LOGGER.info("Loaded %d assets from %s", len(library), path)
        return library, info.modified_at

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------
    def save(self, library: Library, path: Path) -> bool:
        path = _normalise(path)
        now = self._clock()
        stamped = library.touched(now)
        try:
            payload = dumps_json(encode_library(stamped))
        except (TypeError, ValueError) as exc:
            LOGGER.error("Failed to serialize library for %s: %s", path, exc)
            return False

        with self._lock:
            self._cached_library = stamped
            self._cached_path = path
            self._cached_time = now
            self._pending[path] += 1
            self._ensure_worker()

        # Blocks while the queue is full.
        self._queue.put(_WriteJob(path, payload, stamped, len(stamped)))
        return True

    def _ensure_worker(self) -> None:
        if self._worker is not None and self._worker.is_alive():
            return
        self._worker = threading.Thread(
            target=self._drain, name="assetkeeper-library-writer", daemon=True
        )
        self._worker.start()

    def _drain(self) -> None:
        while True:
            job = self._queue.get()
            try:
                if job is _STOP:
                    return
                self._write(job)
            except Exception:
                LOGGER.exception("Library writer failed on %s", getattr(job, "path", job))
            finally:
                self._queue.task_done()

    def _write(self, job: _WriteJob) -> None:
        written: Optional[FileMetadata] = None
        try:
            try:
                self._fs.write_text(job.path, job.payload)
            except (LibraryIOError, OSError, ValueError) as exc:
                # The cache keeps the in-memory state.
                LOGGER.error("Failed to write library %s: %s", job.path, exc)
                self._publish(LibrarySaveFailedEvent(path=str(job.path), error=str(exc)))
                return

            try:
                written = self._fs.stat(job.path)
            except LibraryIOError:
                written = None
            LOGGER.info("Saved %d assets to %s", job.asset_count, job.path)
            self._publish(LibrarySavedEvent(path=str(job.path), asset_count=job.asset_count))
        finally:
            self._finish(job, written)

    def _finish(self, job: _WriteJob, written: Optional[FileMetadata]) -> None:
        with self._idle:
            if (
                written is not None
                and self._cached_path == job.path
                and self._cached_library is job.library
            ):
                # Our own write must not look like an external change.
                if self._cached_time is None or written.modified_at > self._cached_time:
                    self._cached_time = written.modified_at
            self._pending[job.path] -= 1
            if self._pending[job.path] <= 0:
                del self._pending[job.path]
            self._idle.notify_all()

    def _publish(self, event) -> None:
        if self._events is not None:
            self._events.publish(event)

    # ------------------------------------------------------------------
    # Queue control
    # ------------------------------------------------------------------
    def flush(self, timeout: Optional[float] = None) -> bool:
        with self._idle:
            return self._idle.wait_for(lambda: not self._pending, timeout=timeout)

    def close(self, timeout: Optional[float] = None) -> bool:
        drained = self.flush(timeout)
        with self._lock:
            worker, self._worker = self._worker, None
        if worker is not None and worker.is_alive():
            self._queue.put(_STOP)
            worker.join(timeout)
        return drained

    def pending_writes(self, path: Optional[Path] = None) -> int:
        with self._lock:
            if path is None:
                return sum(self._pending.values())
            return self._pending[_normalise(path)]

    # ------------------------------------------------------------------
    # Cache and file helpers
    # ------------------------------------------------------------------
    def clear_cache(self) -> None:
        with self._lock:
            self._cached_library = None
            self._cached_path = None
            self._cached_time = None

    def is_cached(self, path: Path) -> bool:
        with self._lock:
            return self._cached_library is not None and self._cached_path == _normalise(path)

    def exists(self, path: Path) -> bool:
        return self._fs.exists(_normalise(path))

    def stat(self, path: Path) -> Optional[FileMetadata]:
        try:
            return self._fs.stat(_normalise(path))
        except LibraryIOError as exc:
            LOGGER.warning("Unable to stat %s: %s", path, exc)
            return None
