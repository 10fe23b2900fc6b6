from .asset_service import AssetService
from .folder_service import FolderService, normalize_folder_path
from .permission_service import PermissionService, permission_key

__all__ = [
    "AssetService",
    "FolderService",
    "PermissionService",
    "normalize_folder_path",
    "permission_key",
]
