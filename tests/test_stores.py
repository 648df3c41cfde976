import json

import pytest
import yaml

from flatstore.config import StoreConfig
from flatstore.errors import FileParseError, UnsupportedFileTypeError
from flatstore.models import FileType, ReloadSettings
from flatstore.stores import Json, Yaml, open_store, resolve_path


def test_yaml_appends_extension(tmp_path):
    store = Yaml(tmp_path / "settings")
    assert store.file == tmp_path / "settings.yml"
    assert store.file.exists()


def test_yaml_keeps_yaml_extension(tmp_path):
    store = Yaml(tmp_path / "settings.yaml")
    assert store.name == "settings.yaml"


def test_json_round_trip_through_disk(tmp_path):
    store = Json(tmp_path / "data")
    assert store.file.name == "data.json"
    store.set("a.b", [1, 2])
    assert json.loads(store.file.read_text()) == {"a": {"b": [1, 2]}}
    assert Json(tmp_path / "data.json").get("a.b") == [1, 2]


def test_malformed_file_raises_parse_error(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    with pytest.raises(FileParseError):
        Json(path)


def test_open_store_dispatches_on_extension(tmp_path):
    assert isinstance(open_store(tmp_path / "a.yml"), Yaml)
    assert isinstance(open_store(tmp_path / "a.json"), Json)


def test_open_store_rejects_unknown_extension(tmp_path):
    with pytest.raises(UnsupportedFileTypeError):
        open_store(tmp_path / "a.ini")
    assert not (tmp_path / "a.ini").exists()


def test_open_store_uses_config(tmp_path):
    cfg = StoreConfig(
        root=tmp_path,
        reload=ReloadSettings.MANUAL,
        path_prefix="app",
        default_format=FileType.JSON,
    )
    store = open_store(tmp_path / "state", cfg)
    assert isinstance(store, Json)
    assert store.file.name == "state.json"
    assert store.reload_settings is ReloadSettings.MANUAL
    assert store.path_prefix == "app"


def test_open_store_arguments_override_config(tmp_path):
    cfg = StoreConfig(root=tmp_path, reload=ReloadSettings.MANUAL, path_prefix="app")
    store = open_store(
        tmp_path / "s.yml",
        cfg,
        reload_settings=ReloadSettings.AUTOMATIC,
        path_prefix="other",
        defaults={"k": "v"},
    )
    assert store.reload_settings is ReloadSettings.AUTOMATIC
    assert store.path_prefix == "other"
    assert yaml.safe_load(store.file.read_text()) == {"k": "v"}


def test_json_non_utf8_file(tmp_path):
    path = tmp_path / "latin.json"
    path.write_bytes(b'{"a": "\xff"}')
    with pytest.raises(FileParseError):
        Json(path)


def test_resolve_path(tmp_path):
    assert resolve_path(tmp_path / "a.yaml") == (tmp_path / "a.yaml", FileType.YAML)
    assert resolve_path(tmp_path / "a") == (tmp_path / "a.yml", FileType.YAML)
    cfg = StoreConfig(root=tmp_path, default_format=FileType.JSON)
    assert resolve_path(tmp_path / "a", cfg) == (tmp_path / "a.json", FileType.JSON)
    with pytest.raises(UnsupportedFileTypeError):
        resolve_path(tmp_path / "a.ini")
    assert not any(tmp_path.iterdir())
