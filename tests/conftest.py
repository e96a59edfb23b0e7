import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from assetKeeper.application.services.catalog import AssetCatalog  # noqa: E402
from assetKeeper.application.services.library_service import LibraryService  # noqa: E402
from assetKeeper.events.bus import EventBus  # noqa: E402
from assetKeeper.infrastructure.filesystem import LocalFileSystem  # noqa: E402
from assetKeeper.infrastructure.store import JsonLibraryStore  # noqa: E402


class FakeClock:
    """Manually advanced clock so timestamps are deterministic."""

    def __init__(self, start: datetime = datetime(2024, 5, 15, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def library_path(tmp_path):
    return tmp_path / "assetKeeper" / "library.json"


@pytest.fixture
def event_bus():
    bus = EventBus()
    yield bus
    bus.shutdown()


@pytest.fixture
def store(clock, event_bus):
    store = JsonLibraryStore(LocalFileSystem(), clock=clock, event_bus=event_bus)
    yield store
    store.close(timeout=5)


@pytest.fixture
def catalog(store, library_path, clock):
    return AssetCatalog(store, library_path, clock=clock)


@pytest.fixture
def service(catalog, event_bus):
    return LibraryService(catalog, event_bus=event_bus)
