"""Local working copies of images stored on remote volumes."""

from __future__ import annotations

import logging
import shutil
import threading
from pathlib import Path
from typing import List

from assetcat.application.interfaces import ITransformService
from assetcat.domain.models import Asset

_logger = logging.getLogger(__name__)


class TransformSourceCache(ITransformService):
    """Keeps a local copy of a remote image so derivatives can be generated.

    Copies are laid out flat by asset id.  Paths queued for deletion are
    removed on :meth:`purge`, which hosts call once derivative generation
    for the batch is done.
    """

    def __init__(self, cache_dir: Path):
        self._cache_dir = cache_dir
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        self._queued: List[Path] = []
        self._lock = threading.Lock()

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def get_local_source_path(self, asset: Asset) -> Path:
        suffix = f".{asset.extension}" if asset.extension else ""
        return self._cache_dir / f"{asset.id}{suffix}"

    def store_local_source(self, source: Path, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)
        _logger.debug("[TRANSFORM-SOURCE] stored %s -> %s", source, destination)

    def queue_source_for_deleting_if_necessary(self, path: Path) -> None:
        with self._lock:
            if path not in self._queued:
                self._queued.append(path)

    def pending(self) -> List[Path]:
        with self._lock:
            return list(self._queued)

    def purge(self) -> int:
        """Delete every queued copy and return how many files were removed."""
        with self._lock:
            queued, self._queued = self._queued, []
        removed = 0
        for path in queued:
            try:
                path.unlink()
                removed += 1
            except FileNotFoundError:
                continue
            except OSError as exc:
                _logger.warning("[TRANSFORM-SOURCE] could not remove %s: %s", path, exc)
        return removed
