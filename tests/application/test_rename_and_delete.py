import pytest

from assetcat.domain.models import Asset, AssetQuery, Volume
from assetcat.errors import ConflictError
from assetcat.events import AfterDeleteAssetEvent, BeforeDeleteAssetEvent


@pytest.fixture
def upload(asset_service, photos_folder, make_image):
    def _upload(name):
        path = make_image(name)
        return asset_service.save_asset(
            Asset(id=None, volume_id=1, folder_id=photos_folder.id, filename=name, new_file_path=path)
        )

    return _upload


def test_rename_moves_file_and_updates_index(asset_service, upload, adapter):
    asset = upload("a.png")

    assert asset_service.rename_file(asset, "new name.PNG") is True

    assert "photos/new-name.png" in adapter.files
    assert "photos/a.png" not in adapter.files
    assert asset_service.get_file_by_id(asset.id).filename == "new-name.png"


def test_rename_to_sibling_name_is_conflict(asset_service, upload, adapter):
    upload("a.png")
    b = upload("b.png")
    adapter.calls.clear()

    with pytest.raises(ConflictError):
        asset_service.rename_file(b, "a.png")

    assert b.filename == "b.png"
    assert asset_service.get_file_by_id(b.id).filename == "b.png"
    assert "photos/b.png" in adapter.files
    assert adapter.calls == []


def test_rename_refused_by_volume_changes_nothing(asset_service, upload, adapter):
    asset = upload("a.png")
    adapter.refuse_rename = True

    assert asset_service.rename_file(asset, "c.png") is False
    assert asset.filename == "a.png"
    assert asset_service.get_file_by_id(asset.id).filename == "a.png"


def test_rename_keeps_title(asset_service, upload):
    asset = upload("a.png")
    bare = asset_service.find_file(AssetQuery(id=asset.id))
    asset_service.rename_file(bare, "b.png")
    assert asset_service.get_file_by_id(asset.id).title == "a"


def test_delete_batch_skips_missing_ids(asset_service, upload, adapter, event_bus, count_rows):
    asset = upload("a.png")
    seen = []
    event_bus.subscribe(BeforeDeleteAssetEvent, lambda e: seen.append(("before", e.asset.id)))
    event_bus.subscribe(AfterDeleteAssetEvent, lambda e: seen.append(("after", e.asset.id)))

    asset_service.delete_files_by_ids([asset.id, 4242])

    assert asset_service.get_file_by_id(asset.id) is None
    assert "photos/a.png" not in adapter.files
    assert seen == [("before", asset.id), ("after", asset.id)]
    assert count_rows("elements") == 0


def test_delete_ignores_volume_failure(asset_service, upload, adapter):
    asset = upload("a.png")
    adapter.files.clear()

    asset_service.delete_files_by_ids(asset.id)

    assert ("delete_file", "photos/a.png") in adapter.calls
    assert asset_service.get_file_by_id(asset.id) is None


def test_delete_index_only(asset_service, upload, adapter):
    asset = upload("a.png")
    asset_service.delete_files_by_ids(asset.id, delete_file=False)
    assert "photos/a.png" in adapter.files
    assert asset_service.get_file_by_id(asset.id) is None


def test_file_queries(asset_service, upload, photos_folder):
    upload("b.png")
    first = upload("a.png")

    assert [a.filename for a in asset_service.get_files_by_volume_id(1)] == ["a.png", "b.png"]
    assert asset_service.find_file(AssetQuery().in_folder(photos_folder.id).named("a.png")).id == first.id
    assert len(asset_service.find_files(AssetQuery(kind="image"))) == 2
    assert asset_service.get_total_files(AssetQuery(filename=["a.png", "zzz.png"])) == 1
    assert asset_service.get_file_by_id(31337) is None


def test_url_for_file(asset_service, upload, volumes, adapter):
    asset = upload("my photo.png")
    assert asset_service.get_url_for_file(asset) == "https://cdn.example.com/uploads/photos/my-photo.png"

    volumes.register(Volume(id=1, name="Uploads", adapter=adapter, sort_order=1))
    assert asset_service.get_url_for_file(asset) is None
