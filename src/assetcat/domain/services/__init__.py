from .folder_cache import FolderCache
from .folder_tree import build_folder_tree, iter_tree

__all__ = ["FolderCache", "build_folder_tree", "iter_tree"]
