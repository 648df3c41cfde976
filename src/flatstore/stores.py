"""Concrete stores for the supported formats, plus a dispatching opener."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from flatstore.flatfile import FlatFile
from flatstore.formats import format_for
from flatstore.models import FileType, ReloadSettings

if TYPE_CHECKING:
    from flatstore.config import StoreConfig


def _with_extension(path: Path | str, file_type: FileType) -> Path:
    path = Path(path)
    if path.suffix:
        return path
    return path.with_suffix(file_type.extension)


class Yaml(FlatFile):
    """A YAML file; "settings" becomes "settings.yml"."""

    def __init__(self, path: Path | str, **kwargs: Any) -> None:
        super().__init__(_with_extension(path, FileType.YAML), format_for(FileType.YAML), **kwargs)


class Json(FlatFile):
    """A JSON file; "settings" becomes "settings.json"."""

    def __init__(self, path: Path | str, **kwargs: Any) -> None:
        super().__init__(_with_extension(path, FileType.JSON), format_for(FileType.JSON), **kwargs)


_STORES: dict[FileType, type[FlatFile]] = {
    FileType.YAML: Yaml,
    FileType.JSON: Json,
}


def resolve_path(path: Path | str, config: StoreConfig | None = None) -> tuple[Path, FileType]:
    """Return the path open_store would use for path, and its file type.

    Extension-less paths get the extension of config.default_format (YAML
    without a config). Unknown extensions raise UnsupportedFileTypeError.
    """
    path = Path(path)
    if path.suffix:
        file_type = FileType.from_path(path)
        # Let format_for raise for unknown extensions before anything is created.
        format_for(file_type)
        return path, file_type  # type: ignore[return-value]
    file_type = config.default_format if config else FileType.YAML
    return _with_extension(path, file_type), file_type


def open_store(
    path: Path | str,
    config: StoreConfig | None = None,
    *,
    reload_settings: ReloadSettings | None = None,
    path_prefix: str | None = None,
    defaults: dict[str, Any] | None = None,
) -> FlatFile:
    """Open path with the store matching its extension (see resolve_path).

    Explicit arguments win over config values.
    """
    path, file_type = resolve_path(path, config)

    settings = reload_settings or (config.reload if config else ReloadSettings.INTELLIGENT)
    prefix = path_prefix if path_prefix is not None else (config.path_prefix if config else None)

    store_cls = _STORES[file_type]
    return store_cls(path, reload_settings=settings, path_prefix=prefix, defaults=defaults)
