import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union
from urllib.parse import quote

from assetcat.application.interfaces import IElementService, ITransformService
from assetcat.config import ASSET_ELEMENT_TYPE, DEFAULT_FILENAME_WORD_SEPARATOR
from assetcat.domain.models import Asset, AssetQuery, Folder, Volume
from assetcat.domain.models.query import sibling_query
from assetcat.domain.repositories import IAssetRepository, IFolderRepository
from assetcat.domain.services import FolderCache
from assetcat.domain.validation import validate_asset_record
from assetcat.errors import (
    CancelledError,
    ConflictError,
    FileAccessError,
    LogicError,
    MissingEntityError,
    PersistenceError,
    ValidationError,
    VolumeError,
)
from assetcat.events import (
    AfterDeleteAssetEvent,
    AfterSaveAssetEvent,
    BeforeDeleteAssetEvent,
    BeforeSaveAssetEvent,
    BeforeUploadAssetEvent,
    EventBus,
)
from assetcat.infrastructure.db import ConnectionPool, UnitOfWork
from assetcat.infrastructure.volumes import VolumeRegistry
from assetcat.utils.file_kinds import get_file_kind
from assetcat.utils.filenames import default_title, prepare_asset_name
from assetcat.utils.image_info import image_dimensions


class AssetService:
    """
    Asset queries plus the write paths: save (with upload), rename and delete.
    Physical effects go through the owning volume's adapter; index writes go
    through the repositories and the element service.
    """

    def __init__(
        self,
        pool: ConnectionPool,
        asset_repo: IAssetRepository,
        folder_repo: IFolderRepository,
        elements: IElementService,
        volumes: VolumeRegistry,
        events: EventBus,
        transforms: Optional[ITransformService] = None,
        word_separator: str = DEFAULT_FILENAME_WORD_SEPARATOR,
        ascii_filenames: bool = False,
    ):
        self._pool = pool
        self._repo = asset_repo
        self._folders = folder_repo
        self._elements = elements
        self._volumes = volumes
        self._events = events
        self._transforms = transforms
        self._word_separator = word_separator
        self._ascii_filenames = ascii_filenames
        self._logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_files_by_volume_id(self, volume_id: int) -> List[Asset]:
        return self._repo.find_by_query(AssetQuery(volume_id=volume_id))

    def get_file_by_id(self, file_id: int) -> Optional[Asset]:
        """Return the asset with its title filled in from the element store."""
        asset = self._repo.get(file_id)
        if asset is None:
            return None
        element = self._elements.get_element_by_id(file_id, ASSET_ELEMENT_TYPE)
        if element is not None:
            asset.title = element.title
        return asset

    def find_file(self, query: AssetQuery) -> Optional[Asset]:
        return self._repo.find_one(query)

    def find_files(self, query: AssetQuery) -> List[Asset]:
        return self._repo.find_by_query(query)

    def get_total_files(self, query: AssetQuery) -> int:
        return self._repo.count(query)

    def get_url_for_file(self, asset: Asset) -> Optional[str]:
        """Public URL of *asset*, or ``None`` if its volume serves no URLs."""
        volume = self._volumes.get(asset.volume_id)
        if volume is None or not volume.url:
            return None
        folder = self._folders.get(asset.folder_id)
        if folder is None:
            return None
        return f"{volume.url.rstrip('/')}/{quote(asset.uri(folder))}"

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def save_asset(self, asset: Asset, uow: Optional[UnitOfWork] = None) -> Asset:
        """Upload (when ``new_file_path`` is set) and index *asset*.

        Index writes happen inside *uow* when one is given, otherwise in a
        unit of work of their own.

        Raises:
            LogicError: the asset has no folder, a new asset has no file, or
                its folder or volume cannot be resolved.
            ConflictError: a sibling in the folder already has the filename.
            FileAccessError: ``new_file_path`` cannot be opened.
            BackendConflictError: the file exists on the volume but not in
                the index.
            ValidationError: the derived row is invalid.
            CancelledError: a before-upload or before-save handler vetoed.
            PersistenceError: the element service reported a failed save.
        """
        is_new = asset.is_new

        if is_new and not asset.new_file_path and not asset.index_in_progress:
            raise LogicError("A new asset cannot be created without a file.")
        if asset.folder_id is None:
            raise LogicError("All assets must have a folder id set.")

        asset.filename = self._prepare_name(asset.filename)
        self._check_sibling_conflict(asset, asset.filename)

        volume, folder = self._resolve_location(asset)

        if asset.new_file_path:
            self._upload(asset, volume, folder)
        if asset.kind is None:
            asset.kind = get_file_kind(asset.extension)

        self._store_asset_record(asset, uow)

        if (
            self._transforms is not None
            and not volume.is_local()
            and asset.is_image
            and asset.new_file_path
        ):
            source_path = self._transforms.get_local_source_path(asset)
            self._transforms.store_local_source(Path(asset.new_file_path), source_path)
            self._transforms.queue_source_for_deleting_if_necessary(source_path)

        return asset

    def rename_file(self, asset: Asset, new_filename: str) -> bool:
        """Rename *asset* on its volume and then in the index.

        Returns False, leaving the asset untouched, when the volume reports
        that the rename failed.
        """
        new_filename = self._prepare_name(new_filename)
        self._check_sibling_conflict(asset, new_filename)

        volume, folder = self._resolve_location(asset)

        if not volume.adapter.rename_file(asset.uri(folder), asset.uri(folder, new_filename)):
            self._logger.warning(
                "[RENAME] volume %s refused %r -> %r", volume.id, asset.uri(folder), new_filename
            )
            return False

        asset.filename = new_filename
        self._store_asset_record(asset)
        self._logger.info("[RENAME] id=%s -> %r", asset.id, new_filename)
        return True

    def delete_files_by_ids(self, file_ids: Union[int, Iterable[int]], delete_file: bool = True) -> None:
        """Delete assets from the index and, optionally, from their volumes.

        Unknown ids are skipped.  A failed volume delete is logged and the
        index rows are removed regardless.
        """
        if isinstance(file_ids, int):
            file_ids = [file_ids]
        cache = FolderCache()

        for file_id in file_ids:
            asset = self.get_file_by_id(file_id)
            if asset is None:
                self._logger.debug("[ASSET-DELETE] id=%s not found, skipping", file_id)
                continue

            self._events.publish(BeforeDeleteAssetEvent(asset=asset))

            if delete_file:
                self._delete_physical(asset, cache)

            self._elements.delete_element_by_id(file_id)
            # The element row cascades; this covers element services that do not.
            self._repo.delete(file_id)
            self._logger.info("[ASSET-DELETE] id=%s filename=%r", file_id, asset.filename)

            self._events.publish(AfterDeleteAssetEvent(asset=asset))

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _prepare_name(self, filename: str) -> str:
        return prepare_asset_name(
            filename,
            word_separator=self._word_separator,
            ascii_only=self._ascii_filenames,
        )

    def _check_sibling_conflict(self, asset: Asset, filename: str) -> None:
        existing = self._repo.find_one(sibling_query(asset, filename))
        if existing is not None and existing.id != asset.id:
            raise ConflictError(f"A file with the name “{filename}” already exists in the folder.")

    def _resolve_location(self, asset: Asset) -> Tuple[Volume, Folder]:
        folder = self._folders.get(asset.folder_id)
        if folder is None:
            raise LogicError(f"No folder exists with the ID “{asset.folder_id}”.")
        if asset.volume_id is None:
            asset.volume_id = folder.volume_id

        volume = self._volumes.get(asset.volume_id)
        if volume is None:
            raise LogicError(f"Volume does not exist with the id of {asset.volume_id}.")
        return volume, folder

    def _upload(self, asset: Asset, volume: Volume, folder: Folder) -> None:
        source = Path(asset.new_file_path)
        uri = asset.uri(folder)
        try:
            stream = source.open("rb")
        except OSError as exc:
            raise FileAccessError(f"Could not open file for streaming at {source}") from exc

        with stream:
            if not self._events.request(BeforeUploadAssetEvent(asset=asset, uri=uri)):
                raise CancelledError(f"Upload of “{asset.filename}” was cancelled.")
            # BackendConflictError is left to the caller, which can reconcile
            # the index with what is already on the volume.
            volume.adapter.create_file(uri, stream)

        stat = source.stat()
        asset.date_modified = datetime.fromtimestamp(stat.st_mtime)
        asset.size = stat.st_size
        asset.kind = get_file_kind(asset.extension)
        asset.width = asset.height = None
        if asset.is_image:
            dimensions = image_dimensions(source)
            if dimensions is not None:
                asset.width, asset.height = dimensions

        self._logger.info(
            "[UPLOAD] volume=%s uri=%r size=%s kind=%s", volume.id, uri, asset.size, asset.kind
        )

    def _store_asset_record(self, asset: Asset, uow: Optional[UnitOfWork] = None) -> None:
        is_new = asset.is_new
        try:
            with self._pool.unit_of_work(uow) as work:
                if not is_new and not self._repo.exists(asset.id, uow=work):
                    raise MissingEntityError(f"No asset exists with the ID “{asset.id}”.")

                asset.clear_errors()
                errors = validate_asset_record(asset)
                if errors:
                    asset.add_errors(errors)
                    raise ValidationError(
                        "Saving the asset failed with the following errors: "
                        + ", ".join(asset.all_errors()),
                        errors=asset.errors,
                        model=asset,
                    )

                if is_new and not asset.title:
                    asset.title = default_title(asset.filename)

                if not self._events.request(BeforeSaveAssetEvent(asset=asset, is_new=is_new, uow=work)):
                    raise CancelledError(f"Saving “{asset.filename}” was cancelled.")

                if not self._elements.save_element(asset, validate=False, uow=work):
                    raise PersistenceError("Failed to save the asset element.")

                self._repo.save(asset, uow=work)
                # Still inside the unit of work: a failing handler rolls the save back.
                self._events.publish(
                    AfterSaveAssetEvent(asset=asset, is_new=is_new, uow=work), raise_errors=True
                )
        except Exception:
            if is_new:
                # The element id was handed out inside the rolled back work.
                asset.id = None
            raise

    def _delete_physical(self, asset: Asset, cache: FolderCache) -> None:
        volume = self._volumes.get(asset.volume_id)
        folder = self._folders.get(asset.folder_id, cache=cache)
        if volume is None or folder is None:
            self._logger.warning("[ASSET-DELETE] cannot locate id=%s on its volume", asset.id)
            return
        try:
            volume.adapter.delete_file(asset.uri(folder))
        except VolumeError as exc:
            self._logger.warning("[ASSET-DELETE] volume delete failed for id=%s: %s", asset.id, exc)
