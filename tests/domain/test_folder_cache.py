import pytest

from assetcat.domain.models import Folder
from assetcat.domain.services import FolderCache


def test_records_hits_and_misses():
    cache = FolderCache()
    folder = Folder(id=1, parent_id=None, volume_id=1, name="", path="")
    cache.put(1, folder)
    cache.put(2, None)

    assert 1 in cache and 2 in cache
    assert cache.get(1) is folder
    assert cache.get(2) is None
    assert 3 not in cache


def test_get_unknown_without_default_raises():
    with pytest.raises(KeyError):
        FolderCache().get(99)
    assert FolderCache().get(99, "fallback") == "fallback"


def test_invalidate_single_and_all():
    cache = FolderCache()
    cache.put_all([
        Folder(id=1, parent_id=None, volume_id=1, name="", path=""),
        Folder(id=2, parent_id=1, volume_id=1, name="a", path="a/"),
    ])
    cache.invalidate(1)
    assert 1 not in cache and 2 in cache
    cache.invalidate()
    assert len(cache) == 0
