import json

import pytest
from jsonschema import ValidationError as SchemaValidationError

from assetcat.errors import SettingsLoadError, SettingsValidationError
from assetcat.settings import DEFAULT_SETTINGS, SettingsManager, merge_with_defaults


def test_load_creates_defaults(tmp_path):
    path = tmp_path / "settings.json"
    manager = SettingsManager(path)
    manager.load()

    assert path.exists()
    assert json.loads(path.read_text(encoding="utf-8")) == DEFAULT_SETTINGS
    assert manager.get("pool_size") == DEFAULT_SETTINGS["pool_size"]


def test_load_merges_existing_values(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"log_level": "debug", "pool_size": 2}), encoding="utf-8")
    manager = SettingsManager(path)
    manager.load()

    assert manager.get("log_level") == "DEBUG"
    assert manager.get("pool_size") == 2
    assert manager.get("filename_word_separator") == "-"


def test_invalid_file_raises_load_error(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SettingsLoadError):
        SettingsManager(path).load()


def test_schema_violation_raises_validation_error(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"pool_size": 0}), encoding="utf-8")
    with pytest.raises(SettingsValidationError):
        SettingsManager(path).load()


def test_set_persists_and_notifies(tmp_path):
    path = tmp_path / "settings.json"
    manager = SettingsManager(path)
    manager.load()
    changes = []
    manager.on_change(lambda key, value: changes.append((key, value)))

    manager.set("database_path", tmp_path / "index.db")

    assert json.loads(path.read_text(encoding="utf-8"))["database_path"] == str(tmp_path / "index.db")
    assert changes == [("database_path", str(tmp_path / "index.db"))]


def test_rejected_set_keeps_previous_value(tmp_path):
    manager = SettingsManager(tmp_path / "settings.json")
    manager.load()
    with pytest.raises(SettingsValidationError):
        manager.set("log_level", "LOUD")
    assert manager.get("log_level") == "INFO"


def test_dotted_get():
    manager = SettingsManager()
    assert manager.get("missing.key", "fallback") == "fallback"


def test_merge_with_defaults_validates():
    merged = merge_with_defaults({"convert_filenames_to_ascii": True})
    assert merged["convert_filenames_to_ascii"] is True
    with pytest.raises(SchemaValidationError):
        merge_with_defaults({"pool_timeout": 0})
