"""Field validation for asset rows."""

from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from assetcat.config import MAX_FILENAME_LENGTH, MAX_KIND_LENGTH

from .models import Asset

ASSET_RECORD_SCHEMA: dict[str, Any] = {
    "$id": "assetcat/asset-record.schema.json",
    "type": "object",
    "required": ["volume_id", "folder_id", "filename", "kind"],
    "properties": {
        "id": {"type": ["integer", "null"]},
        "volume_id": {"type": "integer"},
        "folder_id": {"type": "integer"},
        "filename": {"type": "string", "minLength": 1, "maxLength": MAX_FILENAME_LENGTH},
        "kind": {"type": "string", "minLength": 1, "maxLength": MAX_KIND_LENGTH},
        "size": {"type": ["integer", "null"], "minimum": 0},
        "width": {"type": ["integer", "null"], "minimum": 0},
        "height": {"type": ["integer", "null"], "minimum": 0},
        "date_modified": {"type": ["string", "null"]},
    },
}

_validator = Draft202012Validator(ASSET_RECORD_SCHEMA)


def validate_asset_record(asset: Asset) -> Dict[str, List[str]]:
    """Return every validation failure of *asset*'s row, keyed by field."""

    errors: Dict[str, List[str]] = {}
    for error in sorted(_validator.iter_errors(asset.to_record()), key=lambda e: list(e.path)):
        if error.path:
            field = str(error.path[0])
        elif error.validator == "required":
            # "'folder_id' is a required property"
            field = error.message.split("'")[1]
        else:
            field = "record"
        errors.setdefault(field, []).append(error.message)
    return errors


__all__ = ["ASSET_RECORD_SCHEMA", "validate_asset_record"]
