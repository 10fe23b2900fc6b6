import sys
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Set

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from assetcat.application.interfaces import IVolumeAdapter  # noqa: E402
from assetcat.application.services import AssetService, FolderService, PermissionService  # noqa: E402
from assetcat.domain.models import Folder, Volume  # noqa: E402
from assetcat.errors import BackendConflictError, VolumeError  # noqa: E402
from assetcat.events import EventBus  # noqa: E402
from assetcat.infrastructure.db import ConnectionPool, ensure_schema  # noqa: E402
from assetcat.infrastructure.repositories import (  # noqa: E402
    SQLiteAssetRepository,
    SQLiteElementStore,
    SQLiteFolderRepository,
)
from assetcat.infrastructure.services import StaticPermissionChecker, TransformSourceCache  # noqa: E402
from assetcat.infrastructure.volumes import VolumeRegistry  # noqa: E402


class FakeVolumeAdapter(IVolumeAdapter):
    """In-memory volume that records every call."""

    def __init__(self, local: bool = True):
        self.local = local
        self.files: Dict[str, bytes] = {}
        self.dirs: Set[str] = set()
        self.calls: List[tuple] = []
        self.refuse_rename = False
        self.refuse_delete_dir: Set[str] = set()
        self.broken_dirs: Set[str] = set()
        self.last_stream: Optional[BinaryIO] = None

    def is_local(self) -> bool:
        return self.local

    def create_file(self, path: str, stream: BinaryIO) -> None:
        self.calls.append(("create_file", path))
        self.last_stream = stream
        if path in self.files:
            raise BackendConflictError(f"{path} already exists on the volume")
        self.files[path] = stream.read()

    def delete_file(self, path: str) -> bool:
        self.calls.append(("delete_file", path))
        return self.files.pop(path, None) is not None

    def rename_file(self, path: str, new_path: str) -> bool:
        self.calls.append(("rename_file", path, new_path))
        if self.refuse_rename or path not in self.files:
            return False
        self.files[new_path] = self.files.pop(path)
        return True

    def create_dir(self, path: str) -> None:
        self.calls.append(("create_dir", path))
        if path in self.dirs:
            raise BackendConflictError(f"{path} already exists on the volume")
        self.dirs.add(path)

    def delete_dir(self, path: str) -> bool:
        self.calls.append(("delete_dir", path))
        if path in self.broken_dirs:
            raise VolumeError(f"{path} is not reachable")
        if path in self.refuse_delete_dir:
            return False
        self.dirs.discard(path.rstrip("/"))
        return True


@pytest.fixture
def db_pool(tmp_path):
    pool = ConnectionPool(tmp_path / "catalog.db")
    ensure_schema(pool)
    yield pool
    pool.close_all()


@pytest.fixture
def folder_repo(db_pool):
    return SQLiteFolderRepository(db_pool)


@pytest.fixture
def asset_repo(db_pool):
    return SQLiteAssetRepository(db_pool)


@pytest.fixture
def element_store(db_pool):
    return SQLiteElementStore(db_pool)


@pytest.fixture
def adapter():
    return FakeVolumeAdapter()


@pytest.fixture
def volume(adapter):
    return Volume(id=1, name="Uploads", adapter=adapter, sort_order=1, url="https://cdn.example.com/uploads")


@pytest.fixture
def volumes(volume):
    return VolumeRegistry([volume])


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def transforms(tmp_path):
    return TransformSourceCache(tmp_path / "sources")


@pytest.fixture
def folder_service(folder_repo, volumes, event_bus):
    return FolderService(folder_repo, volumes, event_bus)


@pytest.fixture
def asset_service(db_pool, asset_repo, folder_repo, element_store, volumes, event_bus, transforms):
    return AssetService(
        db_pool,
        asset_repo,
        folder_repo,
        element_store,
        volumes,
        event_bus,
        transforms=transforms,
    )


@pytest.fixture
def permission_checker():
    return StaticPermissionChecker()


@pytest.fixture
def permission_service(folder_repo, asset_repo, permission_checker):
    return PermissionService(folder_repo, asset_repo, permission_checker)


@pytest.fixture
def root_folder(folder_repo, volume):
    return folder_repo.save(Folder(id=None, parent_id=None, volume_id=volume.id, name=volume.name, path=""))


@pytest.fixture
def photos_folder(folder_repo, root_folder):
    return folder_repo.save(
        Folder(id=None, parent_id=root_folder.id, volume_id=root_folder.volume_id, name="photos", path="photos/")
    )


@pytest.fixture
def count_rows(db_pool):
    def _count(table: str) -> int:
        with db_pool.connection() as conn:
            return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]

    return _count


@pytest.fixture
def make_image(tmp_path):
    from PIL import Image

    def _make(name: str = "sunset photo.PNG", size=(40, 30)) -> Path:
        path = tmp_path / "incoming" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, color=(200, 80, 20)).save(path, format="PNG")
        return path

    return _make
