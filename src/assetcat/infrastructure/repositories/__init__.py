from .sqlite_asset_repository import SQLiteAssetRepository
from .sqlite_element_store import SQLiteElementStore
from .sqlite_folder_repository import SQLiteFolderRepository

__all__ = ["SQLiteAssetRepository", "SQLiteElementStore", "SQLiteFolderRepository"]
