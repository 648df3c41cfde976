"""Enums shared across the store: reload policies and file formats."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from flatstore.errors import InvalidSettingError, UnsupportedFileTypeError

# Older config files spell the policies as adverbs.
_RELOAD_ALIASES = {
    "automatically": "automatic",
    "manually": "manual",
}


class ReloadSettings(Enum):
    """When a store re-reads its backing file before answering a query."""

    AUTOMATIC = "automatic"      # before every query
    INTELLIGENT = "intelligent"  # only when the on-disk mtime moved forward
    MANUAL = "manual"            # only on reload(force=True)

    @classmethod
    def parse(cls, text: str) -> ReloadSettings:
        value = text.strip().lower()
        value = _RELOAD_ALIASES.get(value, value)
        try:
            return cls(value)
        except ValueError:
            msg = f"No proper reload setting: {text!r}"
            raise InvalidSettingError(msg) from None


class FileType(Enum):
    """Supported on-disk formats, keyed by their recognised extensions."""

    YAML = (".yml", ".yaml")
    JSON = (".json",)

    @property
    def extension(self) -> str:
        """Canonical extension used when a path is given without one."""
        return self.value[0]

    @classmethod
    def from_path(cls, path: Path | str) -> FileType | None:
        suffix = Path(path).suffix.lower()
        for file_type in cls:
            if suffix in file_type.value:
                return file_type
        return None

    @classmethod
    def parse(cls, name: str) -> FileType:
        key = name.strip().upper()
        if key == "YML":
            key = "YAML"
        try:
            return cls[key]
        except KeyError:
            msg = f"Unsupported file type: {name!r}"
            raise UnsupportedFileTypeError(msg) from None
