from assetcat.domain.models import Asset, Volume
from assetcat.infrastructure.services import StaticPermissionChecker, TransformSourceCache
from assetcat.infrastructure.volumes import VolumeRegistry


def test_transform_source_cache_copies_and_purges(tmp_path):
    cache = TransformSourceCache(tmp_path / "sources")
    source = tmp_path / "upload.jpg"
    source.write_bytes(b"jpeg bytes")
    asset = Asset(id=42, volume_id=1, folder_id=1, filename="upload.JPG")

    target = cache.get_local_source_path(asset)
    assert target == tmp_path / "sources" / "42.jpg"

    cache.store_local_source(source, target)
    cache.queue_source_for_deleting_if_necessary(target)
    cache.queue_source_for_deleting_if_necessary(target)
    assert target.read_bytes() == b"jpeg bytes"
    assert cache.pending() == [target]

    assert cache.purge() == 1
    assert not target.exists()
    assert cache.purge() == 0


def test_static_permission_checker():
    checker = StaticPermissionChecker(["saveAssetInVolume:1"])
    assert checker.check_permission("saveAssetInVolume:1")
    assert not checker.check_permission("saveAssetInVolume:2")
    checker.grant("*")
    assert checker.check_permission("anything:9")


def test_volume_registry(adapter):
    registry = VolumeRegistry([
        Volume(id=1, name="B", adapter=adapter, sort_order=2),
        Volume(id=2, name="A", adapter=adapter, sort_order=1),
    ])
    assert [v.id for v in registry.all()] == [2, 1]
    assert registry.sort_orders() == {1: 2, 2: 1}
    assert registry.get(None) is None
    registry.unregister(1)
    assert 1 not in registry and len(registry) == 1
