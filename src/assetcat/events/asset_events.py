from dataclasses import dataclass
from typing import Any, Optional

from .bus import CancellableEvent, Event
from ..domain.models import Asset, Folder


@dataclass(kw_only=True)
class BeforeUploadAssetEvent(CancellableEvent):
    asset: Asset
    uri: str = ""


@dataclass(kw_only=True)
class BeforeSaveAssetEvent(CancellableEvent):
    asset: Asset
    is_new: bool = False
    # Active unit of work, so handlers can write inside the same transaction.
    uow: Optional[Any] = None


@dataclass(kw_only=True)
class AfterSaveAssetEvent(Event):
    asset: Asset
    is_new: bool = False
    uow: Optional[Any] = None


@dataclass(kw_only=True)
class BeforeDeleteAssetEvent(Event):
    asset: Asset


@dataclass(kw_only=True)
class AfterDeleteAssetEvent(Event):
    asset: Asset


@dataclass(kw_only=True)
class FolderDeletedEvent(Event):
    folder: Folder
    deleted_on_volume: bool = False
