"""Format codecs: turn raw file bytes into a mapping and back.

Every codec satisfies the Reparseable protocol, so FlatFile can re-read
any supported format without knowing which one it holds.
"""

from __future__ import annotations

import json
from typing import Any, Protocol

import yaml

from flatstore.errors import FileParseError, FileSerializeError, UnsupportedFileTypeError
from flatstore.models import FileType


class Reparseable(Protocol):
    """Parses a whole document into a mapping and serialises it back."""

    def parse(self, raw: bytes) -> dict[str, Any]: ...

    def dump(self, data: dict[str, Any]) -> str: ...


def _require_mapping(doc: Any, kind: str) -> dict[str, Any]:
    if doc is None:
        return {}
    if not isinstance(doc, dict):
        msg = f"{kind} document root must be a mapping, got {type(doc).__name__}"
        raise FileParseError(msg)
    return doc


class YamlFormat:
    """PyYAML safe loader/dumper, block style, key order kept."""

    def parse(self, raw: bytes) -> dict[str, Any]:
        try:
            doc = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            msg = f"Invalid YAML: {exc}"
            raise FileParseError(msg) from exc
        return _require_mapping(doc, "YAML")

    def dump(self, data: dict[str, Any]) -> str:
        if not data:
            return ""
        try:
            return yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
        except yaml.YAMLError as exc:
            msg = f"Cannot write YAML: {exc}"
            raise FileSerializeError(msg) from exc


class JsonFormat:
    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def parse(self, raw: bytes) -> dict[str, Any]:
        try:
            text = raw.decode("utf-8")
            if not text.strip():
                return {}
            doc = json.loads(text)
        except UnicodeDecodeError as exc:
            msg = f"Invalid JSON: not UTF-8 ({exc})"
            raise FileParseError(msg) from exc
        except json.JSONDecodeError as exc:
            msg = f"Invalid JSON: {exc}"
            raise FileParseError(msg) from exc
        return _require_mapping(doc, "JSON")

    def dump(self, data: dict[str, Any]) -> str:
        try:
            return json.dumps(data, indent=self.indent, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as exc:
            msg = f"Cannot write JSON: {exc}"
            raise FileSerializeError(msg) from exc


_FORMATS: dict[FileType, Reparseable] = {
    FileType.YAML: YamlFormat(),
    FileType.JSON: JsonFormat(),
}


def format_for(file_type: FileType | None) -> Reparseable:
    """Return the registered codec for file_type."""
    if file_type is None or file_type not in _FORMATS:
        msg = f"No codec registered for file type: {file_type}"
        raise UnsupportedFileTypeError(msg)
    return _FORMATS[file_type]
