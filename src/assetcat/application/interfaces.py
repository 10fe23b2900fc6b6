from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, BinaryIO, Optional

from assetcat.domain.models import Asset, Element


class IVolumeAdapter(ABC):
    """Physical storage operations of a volume backend.

    Paths are volume-relative URIs: a folder path such as ``"a/b/"`` with the
    filename appended for files.
    """

    @abstractmethod
    def is_local(self) -> bool:
        """Whether files live on local disk (as opposed to remote storage)."""
        pass

    @abstractmethod
    def create_file(self, path: str, stream: BinaryIO) -> None:
        """
        Store the contents of *stream* at *path*.
        Raises BackendConflictError if a file already exists there, or
        VolumeError for any other failure.
        """
        pass

    @abstractmethod
    def delete_file(self, path: str) -> bool:
        pass

    @abstractmethod
    def rename_file(self, path: str, new_path: str) -> bool:
        pass

    @abstractmethod
    def create_dir(self, path: str) -> None:
        """
        Create the directory at *path* (no trailing slash).
        Raises BackendConflictError if it already exists.
        """
        pass

    @abstractmethod
    def delete_dir(self, path: str) -> bool:
        pass


class IElementService(ABC):
    """Identity and content persistence for catalog elements."""

    @abstractmethod
    def save_element(self, asset: Asset, validate: bool = True, uow: Any = None) -> bool:
        """
        Persist the element row for *asset*, assigning ``asset.id`` when new.
        Returns False (with errors attached to the asset) on failure.
        """
        pass

    @abstractmethod
    def get_element_by_id(self, id: int, type: Optional[str] = None, locale: Optional[str] = None) -> Optional[Element]:
        pass

    @abstractmethod
    def delete_element_by_id(self, id: int) -> bool:
        pass


class IPermissionChecker(ABC):
    """Answers whether the current user holds a named permission."""

    @abstractmethod
    def check_permission(self, name: str) -> bool:
        pass


class ITransformService(ABC):
    """The part of the image transform subsystem the catalog calls into."""

    @abstractmethod
    def get_local_source_path(self, asset: Asset) -> Path:
        """Where a local working copy of *asset* is kept for derivatives."""
        pass

    @abstractmethod
    def store_local_source(self, source: Path, destination: Path) -> None:
        pass

    @abstractmethod
    def queue_source_for_deleting_if_necessary(self, path: Path) -> None:
        pass
