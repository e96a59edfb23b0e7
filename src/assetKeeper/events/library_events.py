from dataclasses import dataclass, field
from typing import List

from .bus import Event


@dataclass(kw_only=True)
class AssetAddedEvent(Event):
    asset_id: str
    name: str = ""


@dataclass(kw_only=True)
class AssetUpdatedEvent(Event):
    asset_id: str
    name: str = ""


@dataclass(kw_only=True)
class AssetRemovedEvent(Event):
    asset_id: str


@dataclass(kw_only=True)
class GroupChangedEvent(Event):
    """Published whenever group membership changes."""
    group_id: str
    child_ids: List[str] = field(default_factory=list)
    action: str = ""


@dataclass(kw_only=True)
class LibrarySavedEvent(Event):
    path: str
    asset_count: int = 0


@dataclass(kw_only=True)
class LibrarySaveFailedEvent(Event):
    path: str
    error: str = ""


@dataclass(kw_only=True)
class SettingsChangedEvent(Event):
    key: str
    value: object = None
