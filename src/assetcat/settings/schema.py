"""Schema helpers for the catalog settings file."""

from __future__ import annotations

import os
from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import DEFAULT_FILENAME_WORD_SEPARATOR, DEFAULT_POOL_SIZE, DEFAULT_POOL_TIMEOUT_SEC

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "assetcat/settings.schema.json",
    "type": "object",
    "required": ["schema", "pool_size", "pool_timeout", "log_level"],
    "properties": {
        "schema": {"const": "assetcat/settings@1"},
        "database_path": {"type": ["string", "null"]},
        "pool_size": {"type": "integer", "minimum": 1, "maximum": 64},
        "pool_timeout": {"type": "number", "exclusiveMinimum": 0},
        "log_level": {
            "type": "string",
            "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        },
        "filename_word_separator": {"type": "string", "maxLength": 1},
        "convert_filenames_to_ascii": {"type": "boolean"},
        "transform_source_dir": {"type": ["string", "null"]},
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "assetcat/settings@1",
    "database_path": None,
    "pool_size": DEFAULT_POOL_SIZE,
    "pool_timeout": DEFAULT_POOL_TIMEOUT_SEC,
    "log_level": "INFO",
    "filename_word_separator": DEFAULT_FILENAME_WORD_SEPARATOR,
    "convert_filenames_to_ascii": False,
    "transform_source_dir": None,
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)

_PATH_KEYS = frozenset({"database_path", "transform_source_dir"})


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in _PATH_KEYS and value not in {None, ""}:
                try:
                    merged[key] = os.fspath(value)
                except TypeError:
                    continue
                continue
            if key == "log_level" and isinstance(value, str):
                merged[key] = value.upper()
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
