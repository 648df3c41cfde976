"""Flat-file key-value stores: one YAML or JSON file, read through dotted keys.

    store = Yaml("config/settings.yml")
    store.set("server.port", 7343)
    store.key_set()          # {"server.port"}
    store.has_key("server")  # True

The parsed contents are cached in memory and re-read from disk according
to the store's ReloadSettings:

    AUTOMATIC    before every query
    INTELLIGENT  when the file changed on disk since the last sync (default)
    MANUAL       only on reload(force=True)

Reloads happen inline, on the thread that issued the query.
"""

from flatstore.config import StoreConfig, init_config, load_config
from flatstore.errors import FileParseError, FlatStoreError, InvalidSettingError, UnsupportedFileTypeError
from flatstore.filedata import FileData
from flatstore.flatfile import FlatFile
from flatstore.formats import JsonFormat, Reparseable, YamlFormat
from flatstore.models import FileType, ReloadSettings
from flatstore.stores import Json, Yaml, open_store

__all__ = [
    "FileData",
    "FileParseError",
    "FileType",
    "FlatFile",
    "FlatStoreError",
    "InvalidSettingError",
    "Json",
    "JsonFormat",
    "ReloadSettings",
    "Reparseable",
    "StoreConfig",
    "UnsupportedFileTypeError",
    "Yaml",
    "YamlFormat",
    "init_config",
    "load_config",
    "open_store",
]
