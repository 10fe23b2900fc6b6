import logging
from typing import Iterable, Union

from assetcat.application.interfaces import IPermissionChecker
from assetcat.domain.repositories import IAssetRepository, IFolderRepository
from assetcat.domain.services import FolderCache
from assetcat.errors import AccessError


def permission_key(permission: str, volume_id: int) -> str:
    return f"{permission}:{volume_id}"


class PermissionService:
    """Volume-scoped permission checks for folders and files."""

    def __init__(
        self,
        folder_repo: IFolderRepository,
        asset_repo: IAssetRepository,
        checker: IPermissionChecker,
    ):
        self._folders = folder_repo
        self._assets = asset_repo
        self._checker = checker
        self._logger = logging.getLogger(__name__)

    def check_permission_by_folder_ids(self, folder_ids: Union[int, Iterable[int]], permission: str) -> None:
        """Raise AccessError unless *permission* is held on every folder's volume."""
        if isinstance(folder_ids, int):
            folder_ids = [folder_ids]
        cache = FolderCache()
        for folder_id in folder_ids:
            folder = self._folders.get(folder_id, cache=cache)
            if folder is None:
                raise AccessError(
                    "That folder does not seem to exist anymore. Re-index the volume and try again."
                )
            self._require(permission, folder.volume_id)

    def check_permission_by_file_ids(self, file_ids: Union[int, Iterable[int]], permission: str) -> None:
        if isinstance(file_ids, int):
            file_ids = [file_ids]
        for file_id in file_ids:
            asset = self._assets.get(file_id)
            if asset is None:
                raise AccessError(
                    "That file does not seem to exist anymore. Re-index the volume and try again."
                )
            self._require(permission, asset.volume_id)

    def can_user_perform_action(self, folder_id: int, action: str) -> bool:
        try:
            self.check_permission_by_folder_ids(folder_id, action)
        except AccessError:
            return False
        return True

    def _require(self, permission: str, volume_id: int) -> None:
        key = permission_key(permission, volume_id)
        if not self._checker.check_permission(key):
            self._logger.info("[PERMISSION] denied %s", key)
            raise AccessError("You don’t have the required permissions for this operation.")
