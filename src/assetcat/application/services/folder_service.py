import logging
from typing import Dict, Iterable, List, Optional, Union

from assetcat.config import PATH_SEPARATOR, VOLUME_ROOT_PATH
from assetcat.domain.models import EMPTY, Folder, FolderQuery, Volume
from assetcat.domain.models.query import escape_param
from assetcat.domain.repositories import IFolderRepository
from assetcat.domain.services import FolderCache, build_folder_tree
from assetcat.errors import ConflictError, LogicError, VolumeError
from assetcat.events import EventBus, FolderDeletedEvent
from assetcat.infrastructure.volumes import VolumeRegistry


def _as_id_list(ids: Union[int, Iterable[int]]) -> List[int]:
    if isinstance(ids, int):
        return [ids]
    return list(ids)


def normalize_folder_path(path: str) -> str:
    """Return *path* relative to its volume and ``/``-terminated.

    The volume root stays the empty string.
    """
    path = path.strip().lstrip(PATH_SEPARATOR)
    if path and not path.endswith(PATH_SEPARATOR):
        path += PATH_SEPARATOR
    return path


class FolderService:
    """
    Folder lookups, tree assembly and folder writes.
    Every public call works against its own FolderCache unless the caller
    passes one in, so lookups never outlive the operation that made them.
    """

    def __init__(
        self,
        folder_repo: IFolderRepository,
        volumes: VolumeRegistry,
        events: EventBus,
    ):
        self._repo = folder_repo
        self._volumes = volumes
        self._events = events
        self._logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def find_folders(self, query: FolderQuery, cache: Optional[FolderCache] = None) -> List[Folder]:
        return self._repo.find(query, cache=cache)

    def find_folder(self, query: FolderQuery, cache: Optional[FolderCache] = None) -> Optional[Folder]:
        return self._repo.find_one(query, cache=cache)

    def get_folder_by_id(self, folder_id: int, cache: Optional[FolderCache] = None) -> Optional[Folder]:
        return self._repo.get(folder_id, cache=cache)

    def get_total_folders(self, query: FolderQuery) -> int:
        return self._repo.count(query)

    def get_all_descendant_folders(self, parent: Folder) -> Dict[int, Folder]:
        """Every folder under *parent*, keyed by id; includes *parent* itself."""
        return self._repo.get_all_descendants(parent)

    def get_root_folder_by_volume_id(self, volume_id: int) -> Optional[Folder]:
        return self.find_folder(
            FolderQuery(volume_id=volume_id, parent_id=EMPTY).ordered_by_path()
        )

    def get_folder_tree_by_volume_ids(self, volume_ids: Union[int, Iterable[int]]) -> List[Folder]:
        """Folder forest for the given volumes, roots ordered by volume sort order."""
        volume_ids = _as_id_list(volume_ids)
        if not volume_ids:
            return []
        folders = self.find_folders(FolderQuery(volume_id=volume_ids).ordered_by_path())
        return build_folder_tree(folders, self._volumes.sort_orders())

    def get_folder_tree_by_folder_id(self, folder_id: int) -> List[Folder]:
        folder = self.get_folder_by_id(folder_id)
        if folder is None:
            return []
        return build_folder_tree([folder], self._volumes.sort_orders())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def create_folder(self, folder: Folder) -> Folder:
        """Create *folder* under its parent, on the volume and in the index.

        Raises LogicError when the parent does not exist, ConflictError when a
        sibling already has the name, and lets BackendConflictError from the
        volume through so the caller can reconcile the index.
        """
        cache = FolderCache()
        parent = self.get_folder_by_id(folder.parent_id, cache) if folder.parent_id is not None else None
        if parent is None:
            raise LogicError(f"No folder exists with the ID “{folder.parent_id}”")

        existing = self.find_folder(FolderQuery(parent_id=parent.id, name=escape_param(folder.name)), cache)
        if existing is not None and (folder.id is None or folder.id != existing.id):
            raise ConflictError(
                f"A folder with the name “{folder.name}” already exists in the folder."
            )

        volume = self._require_volume(parent.volume_id)
        folder.volume_id = parent.volume_id
        folder.path = parent.child_path(folder.name)

        volume.adapter.create_dir(folder.path.rstrip(PATH_SEPARATOR))
        return self.store_folder_record(folder, cache)

    def store_folder_record(self, folder: Folder, cache: Optional[FolderCache] = None) -> Folder:
        """Insert or update the index row for *folder*; assigns its id."""
        return self._repo.save(folder, cache=cache)

    def ensure_folder_by_full_path_and_volume_id(
        self,
        full_path: str,
        volume_id: int,
        cache: Optional[FolderCache] = None,
    ) -> int:
        """Return the id of the folder at *full_path*, creating index rows as needed.

        Missing ancestors are created first, so ``"a/b/"`` on an empty volume
        yields rows for ``"a/"`` and ``"a/b/"``.  A top-level folder hangs off
        the volume root folder when one is indexed and has no parent
        otherwise.  Only the index is touched; the volume is not.
        """
        if cache is None:
            cache = FolderCache()
        path = normalize_folder_path(full_path)

        existing = self.find_folder(FolderQuery(path=path, volume_id=volume_id), cache)
        if existing is not None:
            return existing.id

        if path == VOLUME_ROOT_PATH:
            volume = self._volumes.get(volume_id)
            folder = Folder(
                id=None,
                parent_id=None,
                volume_id=volume_id,
                name=volume.name if volume is not None else "",
                path=VOLUME_ROOT_PATH,
            )
            return self._store_ensured(folder, cache)

        parts = path.rstrip(PATH_SEPARATOR).split(PATH_SEPARATOR)
        name = parts.pop()

        if parts:
            parent_path = PATH_SEPARATOR.join(parts) + PATH_SEPARATOR
            parent_id = self.ensure_folder_by_full_path_and_volume_id(parent_path, volume_id, cache)
        else:
            root = self.find_folder(
                FolderQuery(volume_id=volume_id, path=VOLUME_ROOT_PATH, parent_id=EMPTY), cache
            )
            parent_id = root.id if root is not None else None

        folder = Folder(id=None, parent_id=parent_id, volume_id=volume_id, name=name, path=path)
        return self._store_ensured(folder, cache)

    def delete_folders_by_ids(
        self,
        folder_ids: Union[int, Iterable[int]],
        delete_folder: bool = True,
        strict: Optional[bool] = None,
    ) -> None:
        """Delete folders (and, through the index cascade, their contents).

        With ``strict=None`` a failed volume delete is fatal only when a
        single id was requested; in a batch it is logged and the row is
        removed anyway.  ``True`` or ``False`` force either behaviour.
        Ids that no longer resolve are skipped.
        """
        folder_ids = _as_id_list(folder_ids)
        fatal = len(folder_ids) == 1 if strict is None else strict
        cache = FolderCache()

        for folder_id in folder_ids:
            folder = self.get_folder_by_id(folder_id, cache)
            if folder is None:
                self._logger.debug("[FOLDER-DELETE] id=%s not found, skipping", folder_id)
                continue

            deleted_on_volume = False
            if delete_folder:
                deleted_on_volume = self._delete_physical(folder)
                if not deleted_on_volume:
                    if fatal:
                        raise VolumeError(f"Folder “{folder.path}” cannot be deleted!")
                    self._logger.warning(
                        "[FOLDER-DELETE] volume %s could not delete %r; removing index row anyway",
                        folder.volume_id, folder.path,
                    )

            self._repo.delete(folder_id, cache=cache)
            self._logger.info("[FOLDER-DELETE] id=%s path=%r", folder_id, folder.path)
            self._events.publish(FolderDeletedEvent(folder=folder, deleted_on_volume=deleted_on_volume))

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _require_volume(self, volume_id: int) -> Volume:
        volume = self._volumes.get(volume_id)
        if volume is None:
            raise LogicError(f"Volume does not exist with the id of {volume_id}.")
        return volume

    def _delete_physical(self, folder: Folder) -> bool:
        volume = self._volumes.get(folder.volume_id)
        if volume is None:
            return False
        try:
            return bool(volume.adapter.delete_dir(folder.path))
        except VolumeError as exc:
            self._logger.warning("[FOLDER-DELETE] volume delete failed for %r: %s", folder.path, exc)
            return False

    def _store_ensured(self, folder: Folder, cache: FolderCache) -> int:
        try:
            self.store_folder_record(folder, cache)
        except ConflictError:
            # Another writer indexed the same path first.
            existing = self.find_folder(FolderQuery(path=folder.path, volume_id=folder.volume_id), cache)
            if existing is None:
                raise
            return existing.id
        return folder.id
