"""FileData: the in-memory, dotted-key view of a parsed flat file.

Keys address nested mappings with dots:

    data = FileData({"server": {"port": 7343}})
    data.get("server.port")          # 7343
    data.insert("server.host", "x")  # {"server": {"port": 7343, "host": "x"}}
    data.key_set()                   # {"server.port", "server.host"}

Insertion order of the underlying dicts is preserved so a file written
back out keeps its original layout.
"""

from __future__ import annotations

import copy
from typing import Any

_MISSING = object()


def _normalise(value: Any) -> Any:
    """Deep-copy mappings into plain dicts with string keys."""
    if isinstance(value, dict):
        return {str(k): _normalise(v) for k, v in value.items()}
    return copy.deepcopy(value)


class FileData:
    """Nested key-value container addressed by dotted paths."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = _normalise(data) if data else {}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileData:
        return cls(data)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _lookup(self, key: str) -> Any:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return _MISSING
            node = node[part]
        return node

    def contains_key(self, key: str) -> bool:
        return self._lookup(key) is not _MISSING

    def get(self, key: str, default: Any = None) -> Any:
        value = self._lookup(key)
        return default if value is _MISSING else value

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains_key(key)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(self, key: str, value: Any) -> None:
        """Set key to value, creating (or overwriting) intermediate mappings."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = _normalise(value)

    def remove(self, key: str) -> None:
        """Remove key and prune any mapping the removal leaves empty."""
        parts = key.split(".")
        trail: list[tuple[dict[str, Any], str]] = []
        node: Any = self._data
        for part in parts:
            if not isinstance(node, dict) or part not in node:
                return
            trail.append((node, part))
            node = node[part]

        parent, last = trail.pop()
        del parent[last]
        while trail and not parent:
            parent, last = trail.pop()
            del parent[last]

    def clear(self) -> None:
        self._data.clear()

    # ------------------------------------------------------------------
    # Key sets
    # ------------------------------------------------------------------

    def _section(self, key: str | None) -> dict[str, Any] | None:
        if key is None:
            return self._data
        value = self._lookup(key)
        return value if isinstance(value, dict) else None

    def single_layer_key_set(self, key: str | None = None) -> set[str]:
        """Immediate child keys of the root, or of the mapping at key."""
        section = self._section(key)
        return set(section) if section is not None else set()

    def key_set(self, key: str | None = None) -> set[str]:
        """All leaf keys in dotted notation, relative to the root or to key."""
        section = self._section(key)
        if section is None:
            return set()
        return set(_leaf_keys(section))

    def size(self, key: str | None = None) -> int:
        return len(self.key_set(key))

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileData):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"FileData({self._data!r})"


def _leaf_keys(mapping: dict[str, Any], prefix: str = "") -> list[str]:
    keys: list[str] = []
    for k, v in mapping.items():
        full = f"{prefix}{k}"
        if isinstance(v, dict) and v:
            keys.extend(_leaf_keys(v, full + "."))
        else:
            keys.append(full)
    return keys
