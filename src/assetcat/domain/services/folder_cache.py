from __future__ import annotations

from typing import Dict, Iterable, Optional

from ..models import Folder

_MISSING = object()


class FolderCache:
    """Folder-by-id lookups remembered for one logical operation.

    Both hits and misses are recorded so a repeated lookup of a deleted id
    does not go back to the database.  Create one per request or service
    call and let it go out of scope afterwards; repositories call
    :meth:`invalidate` on every write they perform.
    """

    def __init__(self) -> None:
        self._entries: Dict[int, Optional[Folder]] = {}

    def __contains__(self, folder_id: int) -> bool:
        return folder_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, folder_id: int, default=_MISSING):
        if folder_id in self._entries:
            return self._entries[folder_id]
        if default is _MISSING:
            raise KeyError(folder_id)
        return default

    def put(self, folder_id: int, folder: Optional[Folder]) -> None:
        self._entries[folder_id] = folder

    def put_all(self, folders: Iterable[Folder]) -> None:
        for folder in folders:
            if folder.id is not None:
                self._entries[folder.id] = folder

    def invalidate(self, folder_id: Optional[int] = None) -> None:
        if folder_id is None:
            self._entries.clear()
        else:
            self._entries.pop(folder_id, None)


__all__ = ["FolderCache"]
