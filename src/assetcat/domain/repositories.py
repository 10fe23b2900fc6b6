from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .models import Asset, Folder
from .models.query import AssetQuery, FolderQuery
from .services.folder_cache import FolderCache


class IFolderRepository(ABC):
    @abstractmethod
    def get(self, id: int, cache: Optional[FolderCache] = None, uow: Any = None) -> Optional[Folder]:
        """Find single folder by ID"""
        pass

    @abstractmethod
    def find(self, query: FolderQuery, cache: Optional[FolderCache] = None, uow: Any = None) -> List[Folder]:
        """Find folders by query object"""
        pass

    @abstractmethod
    def find_one(self, query: FolderQuery, cache: Optional[FolderCache] = None, uow: Any = None) -> Optional[Folder]:
        pass

    @abstractmethod
    def count(self, query: FolderQuery) -> int:
        pass

    @abstractmethod
    def get_all_descendants(self, parent: Folder, cache: Optional[FolderCache] = None) -> Dict[int, Folder]:
        """Folders in the parent's volume whose path extends the parent's path"""
        pass

    @abstractmethod
    def save(self, folder: Folder, cache: Optional[FolderCache] = None, uow: Any = None) -> Folder:
        """Insert or update; assigns ``folder.id`` on insert"""
        pass

    @abstractmethod
    def delete(self, id: int, cache: Optional[FolderCache] = None, uow: Any = None) -> None:
        pass


class IAssetRepository(ABC):
    @abstractmethod
    def get(self, id: int, uow: Any = None) -> Optional[Asset]:
        """Find single asset by ID"""
        pass

    @abstractmethod
    def exists(self, id: int, uow: Any = None) -> bool:
        pass

    @abstractmethod
    def find_by_query(self, query: AssetQuery, uow: Any = None) -> List[Asset]:
        """Find assets by query object"""
        pass

    @abstractmethod
    def find_one(self, query: AssetQuery, uow: Any = None) -> Optional[Asset]:
        pass

    @abstractmethod
    def count(self, query: AssetQuery) -> int:
        """Count assets matching query"""
        pass

    @abstractmethod
    def save(self, asset: Asset, uow: Any = None) -> None:
        """Save asset row (insert or update); the id must already be assigned"""
        pass

    @abstractmethod
    def delete(self, id: int, uow: Any = None) -> None:
        """Delete asset by ID"""
        pass
