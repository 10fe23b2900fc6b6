from .bus import CancellableEvent, Event, EventBus, Subscription
from .asset_events import (
    AfterDeleteAssetEvent,
    AfterSaveAssetEvent,
    BeforeDeleteAssetEvent,
    BeforeSaveAssetEvent,
    BeforeUploadAssetEvent,
    FolderDeletedEvent,
)

__all__ = [
    "AfterDeleteAssetEvent",
    "AfterSaveAssetEvent",
    "BeforeDeleteAssetEvent",
    "BeforeSaveAssetEvent",
    "BeforeUploadAssetEvent",
    "CancellableEvent",
    "Event",
    "EventBus",
    "FolderDeletedEvent",
    "Subscription",
]
