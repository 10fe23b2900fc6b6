from .core import Asset, Element, Folder, Volume, is_volume_root_path
from .query import (
    EMPTY,
    AssetQuery,
    FolderQuery,
    SortOrder,
    build_asset_sql,
    build_folder_sql,
)

__all__ = [
    "EMPTY",
    "Asset",
    "AssetQuery",
    "Element",
    "Folder",
    "FolderQuery",
    "SortOrder",
    "Volume",
    "build_asset_sql",
    "build_folder_sql",
    "is_volume_root_path",
]
