"""Wiring of the catalog services into one context object."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional

from .config import DEFAULT_DATABASE_NAME, TRANSFORM_SOURCE_DIR_NAME
from .utils.logging import configure_logging, get_logger

if TYPE_CHECKING:  # pragma: no cover - only for type checking
    from .application.interfaces import IElementService, IPermissionChecker, ITransformService
    from .application.services import AssetService, FolderService, PermissionService
    from .domain.models import Volume
    from .events import EventBus
    from .infrastructure.db import ConnectionPool
    from .infrastructure.volumes import VolumeRegistry
    from .settings import SettingsManager

logger = get_logger(__name__)


@dataclass
class AssetCatalog:
    """Container for the services sharing one index database."""

    settings: "SettingsManager"
    pool: "ConnectionPool"
    events: "EventBus"
    volumes: "VolumeRegistry"
    elements: "IElementService"
    transforms: "ITransformService"
    folders: "FolderService"
    assets: "AssetService"
    permissions: "PermissionService"

    def close(self) -> None:
        self.pool.close_all()

    def __enter__(self) -> "AssetCatalog":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _resolve_database_path(settings: "SettingsManager", database_path: Optional[Path]) -> Path:
    if database_path is not None:
        return Path(database_path)
    configured = settings.get("database_path")
    if configured:
        return Path(configured).expanduser()
    return settings.path.parent / DEFAULT_DATABASE_NAME


def create_catalog(
    settings_path: Optional[Path] = None,
    *,
    database_path: Optional[Path] = None,
    volumes: Iterable["Volume"] = (),
    permission_checker: Optional["IPermissionChecker"] = None,
    element_service: Optional["IElementService"] = None,
    transform_service: Optional["ITransformService"] = None,
) -> AssetCatalog:
    """Load settings, open the index database and build every service.

    Collaborators that are not supplied fall back to the bundled SQLite
    element store, the local transform source cache and a permission
    checker that grants nothing.
    """

    from .application.services import AssetService, FolderService, PermissionService
    from .events import EventBus
    from .infrastructure.db import ConnectionPool, ensure_schema
    from .infrastructure.repositories import (
        SQLiteAssetRepository,
        SQLiteElementStore,
        SQLiteFolderRepository,
    )
    from .infrastructure.services import StaticPermissionChecker, TransformSourceCache
    from .infrastructure.volumes import VolumeRegistry
    from .settings import SettingsManager

    settings = SettingsManager(settings_path)
    settings.load()
    configure_logging(settings.get("log_level", "INFO"))

    db_path = _resolve_database_path(settings, database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    pool = ConnectionPool(
        db_path,
        pool_size=settings.get("pool_size"),
        timeout=settings.get("pool_timeout"),
    )
    ensure_schema(pool)

    if transform_service is None:
        source_dir = settings.get("transform_source_dir")
        cache_dir = Path(source_dir).expanduser() if source_dir else db_path.parent / TRANSFORM_SOURCE_DIR_NAME
        transform_service = TransformSourceCache(cache_dir)

    events = EventBus()
    registry = VolumeRegistry(volumes)
    folder_repo = SQLiteFolderRepository(pool)
    asset_repo = SQLiteAssetRepository(pool)
    elements = element_service or SQLiteElementStore(pool)

    catalog = AssetCatalog(
        settings=settings,
        pool=pool,
        events=events,
        volumes=registry,
        elements=elements,
        transforms=transform_service,
        folders=FolderService(folder_repo, registry, events),
        assets=AssetService(
            pool,
            asset_repo,
            folder_repo,
            elements,
            registry,
            events,
            transforms=transform_service,
            word_separator=settings.get("filename_word_separator"),
            ascii_filenames=settings.get("convert_filenames_to_ascii"),
        ),
        permissions=PermissionService(
            folder_repo,
            asset_repo,
            permission_checker or StaticPermissionChecker(),
        ),
    )
    logger.info("[CATALOG] opened %s with %d volume(s)", db_path, len(registry))
    return catalog


__all__ = ["AssetCatalog", "create_catalog"]
