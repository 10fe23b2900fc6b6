from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from assetcat.config import PATH_SEPARATOR, VOLUME_ROOT_PATH

if TYPE_CHECKING:  # pragma: no cover - only for type checking
    from assetcat.application.interfaces import IVolumeAdapter


@dataclass(frozen=True)
class Volume:
    id: int
    name: str
    adapter: "IVolumeAdapter"
    sort_order: int = 0
    # Public base URL for files on this volume, if it serves any.
    url: Optional[str] = None

    def is_local(self) -> bool:
        return self.adapter.is_local()


@dataclass
class Folder:
    id: Optional[int]
    parent_id: Optional[int]
    volume_id: int
    name: str
    path: str

    # Filled by tree assembly only; never persisted.
    children: List[Folder] = field(default_factory=list, repr=False, compare=False)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def add_child(self, folder: Folder) -> None:
        self.children.append(folder)

    def child_path(self, name: str) -> str:
        return f"{self.path}{name}{PATH_SEPARATOR}"


@dataclass
class Element:
    """Identity and content row owned by the element store."""

    id: Optional[int]
    type: str
    title: Optional[str] = None
    date_created: Optional[datetime] = None
    date_updated: Optional[datetime] = None


@dataclass
class Asset:
    id: Optional[int]
    volume_id: Optional[int]
    folder_id: Optional[int]
    filename: str
    kind: Optional[str] = None
    size: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    date_modified: Optional[datetime] = None
    title: Optional[str] = None

    # Upload inputs: a replacement/new source on disk, or a flag marking
    # index-only registration of a file that is already on the volume.
    new_file_path: Optional[Path] = None
    index_in_progress: bool = False

    errors: Dict[str, List[str]] = field(default_factory=dict, compare=False)

    @property
    def is_new(self) -> bool:
        return self.id is None

    @property
    def extension(self) -> str:
        return Path(self.filename).suffix.lstrip(".").lower()

    @property
    def is_image(self) -> bool:
        return self.kind == "image"

    def uri(self, folder: Folder, filename: Optional[str] = None) -> str:
        """Return the location of this asset on its volume."""
        return f"{folder.path}{filename or self.filename}"

    def add_errors(self, errors: Dict[str, List[str]]) -> None:
        for attribute, messages in errors.items():
            self.errors.setdefault(attribute, []).extend(messages)

    def has_errors(self) -> bool:
        return any(self.errors.values())

    def all_errors(self) -> List[str]:
        return [message for messages in self.errors.values() for message in messages]

    def clear_errors(self) -> None:
        self.errors.clear()

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "volume_id": self.volume_id,
            "folder_id": self.folder_id,
            "filename": self.filename,
            "kind": self.kind,
            "size": self.size,
            "width": self.width,
            "height": self.height,
            "date_modified": self.date_modified.isoformat() if self.date_modified else None,
        }


def is_volume_root_path(path: str) -> bool:
    return path == VOLUME_ROOT_PATH
