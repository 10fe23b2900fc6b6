"""In-memory lookup of the configured volumes."""

from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional

from assetcat.domain.models import Volume


class VolumeRegistry:
    def __init__(self, volumes: Iterable[Volume] = ()):
        self._volumes: Dict[int, Volume] = {}
        self._lock = threading.Lock()
        for volume in volumes:
            self.register(volume)

    def register(self, volume: Volume) -> None:
        with self._lock:
            self._volumes[volume.id] = volume

    def unregister(self, volume_id: int) -> None:
        with self._lock:
            self._volumes.pop(volume_id, None)

    def get(self, volume_id: Optional[int]) -> Optional[Volume]:
        if volume_id is None:
            return None
        with self._lock:
            return self._volumes.get(volume_id)

    def all(self) -> List[Volume]:
        """Volumes ordered by their sort order."""
        with self._lock:
            volumes = list(self._volumes.values())
        return sorted(volumes, key=lambda volume: volume.sort_order)

    def sort_orders(self) -> Dict[int, int]:
        with self._lock:
            return {volume.id: volume.sort_order for volume in self._volumes.values()}

    def __contains__(self, volume_id: int) -> bool:
        with self._lock:
            return volume_id in self._volumes

    def __len__(self) -> int:
        with self._lock:
            return len(self._volumes)
