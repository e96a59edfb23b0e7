from .bus import Event, EventBus, Subscription
from .library_events import (
    AssetAddedEvent,
    AssetRemovedEvent,
    AssetUpdatedEvent,
    GroupChangedEvent,
    LibrarySavedEvent,
    LibrarySaveFailedEvent,
    SettingsChangedEvent,
)

__all__ = [
    "AssetAddedEvent",
    "AssetRemovedEvent",
    "AssetUpdatedEvent",
    "Event",
    "EventBus",
    "GroupChangedEvent",
    "LibrarySavedEvent",
    "LibrarySaveFailedEvent",
    "SettingsChangedEvent",
    "Subscription",
]
