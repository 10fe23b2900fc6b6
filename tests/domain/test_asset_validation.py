from assetcat.domain.models import Asset
from assetcat.domain.validation import validate_asset_record


def _asset(**overrides):
    values = dict(id=None, volume_id=1, folder_id=2, filename="a.jpg", kind="image", size=10)
    values.update(overrides)
    return Asset(**values)


def test_valid_asset_has_no_errors():
    assert validate_asset_record(_asset()) == {}


def test_errors_are_grouped_by_field():
    errors = validate_asset_record(_asset(filename="", size=-1, kind=None))
    assert set(errors) == {"filename", "size", "kind"}
    assert all(isinstance(messages, list) and messages for messages in errors.values())


def test_overlong_kind_is_rejected():
    errors = validate_asset_record(_asset(kind="x" * 51))
    assert "kind" in errors
