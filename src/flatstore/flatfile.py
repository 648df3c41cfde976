"""FlatFile: one backing file exposed as a dotted-key store.

The store keeps a parsed FileData in memory and decides, before each
query, whether to re-read the file from disk:

    AUTOMATIC    re-read before every query
    INTELLIGENT  re-read when the file changed on disk since the last sync
    MANUAL       only on reload(force=True)

Parsing is delegated to an injected codec (see flatstore.formats), so
the same reload driver serves YAML, JSON or any other Reparseable.

Reads are not locked against a concurrent reload; update() builds the
new FileData completely before swapping it in, so a reader sees either
the old or the new contents, never a mix.
"""

from __future__ import annotations

import functools
import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any

from flatstore import fileutils
from flatstore.errors import InvalidSettingError
from flatstore.filedata import FileData
from flatstore.formats import format_for
from flatstore.models import FileType, ReloadSettings

if TYPE_CHECKING:
    from collections.abc import Callable

    from flatstore.formats import Reparseable

logger = logging.getLogger("flatstore.flatfile")

_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0"}


def should_reload(setting: object, has_changed: Callable[[], bool]) -> bool:
    """Decide whether a reload is due under setting.

    has_changed is only called for INTELLIGENT, so the stat it usually
    performs is skipped for the other policies.
    """
    if setting is ReloadSettings.AUTOMATIC:
        return True
    if setting is ReloadSettings.INTELLIGENT:
        return has_changed()
    if setting is ReloadSettings.MANUAL:
        return False
    msg = f"No proper reload setting: {setting!r}"
    raise InvalidSettingError(msg)


@functools.total_ordering
class FlatFile:
    """Key-value store backed by a single flat file."""

    def __init__(
        self,
        path: Path | str,
        fmt: Reparseable | None = None,
        *,
        reload_settings: ReloadSettings = ReloadSettings.INTELLIGENT,
        path_prefix: str | None = None,
        defaults: dict[str, Any] | None = None,
        encoding: str = "utf-8",
    ) -> None:
        self._lock = threading.RLock()
        self.path_prefix = path_prefix
        self.reload_settings = reload_settings
        self.encoding = encoding
        self._file_data = FileData()
        self._last_modified = 0
        self._signature: fileutils.Signature | None = None
        self._fixed_format = fmt is not None
        if fmt is not None:
            self._format = fmt

        created = self.create(path)
        self.created = created

        if created and defaults:
            self._write(FileData(defaults))
        else:
            self.update()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def file(self) -> Path:
        return self._file

    @property
    def file_type(self) -> FileType | None:
        return self._file_type

    @property
    def file_data(self) -> FileData:
        return self._file_data

    @property
    def last_modified(self) -> int:
        """Milliseconds since the epoch of the last sync with the disk."""
        return self._last_modified

    @property
    def name(self) -> str:
        return self._file.name

    @property
    def file_path(self) -> str:
        return str(self._file.absolute())

    # ------------------------------------------------------------------
    # Creation and sync points
    # ------------------------------------------------------------------

    def _stamp(self, signature: fileutils.Signature | None = None) -> None:
        """Record a sync point: the file's stat signature and a forward-only timestamp."""
        self._signature = signature if signature is not None else fileutils.file_signature(self._file)
        stamp = fileutils.now_ms()
        if self._signature is not None:
            stamp = max(stamp, self._signature[0] // 1_000_000)
        self._last_modified = max(self._last_modified, stamp)

    def create(self, path: Path | str) -> bool:
        """Adopt path as the backing file, creating it if missing.

        Unless a codec was passed to the constructor, the codec follows the
        extension of path; an unknown extension raises before anything is
        created. Returns True if a new (empty) file was created.
        """
        path = Path(path)
        with self._lock:
            file_type = FileType.from_path(path)
            if not self._fixed_format:
                self._format = format_for(file_type)
            self._file = path
            self._file_type = file_type
            if path.exists():
                self._stamp()
                return False
            fileutils.get_and_make(path)
            logger.info("created %s", path)
            self._stamp()
            return True

    def update(self) -> None:
        """Re-read the backing file into a fresh FileData."""
        # Stat before reading: an edit landing mid-read leaves a stale
        # signature behind and is picked up by the next check.
        signature = fileutils.file_signature(self._file)
        raw = self._file.read_bytes()
        data = FileData(self._format.parse(raw))
        with self._lock:
            self._file_data = data
            self._stamp(signature)
        logger.debug("reloaded %s (%d top-level keys)", self._file, len(data))

    def _write(self, data: FileData) -> None:
        """Serialise data over the backing file, then make it the cached copy.

        Serialisation happens first, so a value the codec rejects leaves both
        the file and the cache untouched.
        """
        with self._lock:
            text = self._format.dump(data.to_dict())
            self._file.write_text(text, encoding=self.encoding)
            self._file_data = data
            self._stamp()

    def write(self) -> None:
        """Serialise the in-memory data over the backing file."""
        self._write(self._file_data)

    # ------------------------------------------------------------------
    # Reload policy
    # ------------------------------------------------------------------

    def should_reload(self) -> bool:
        """Apply the reload policy. Raises InvalidSettingError for an unknown one."""
        return should_reload(self.reload_settings, self.has_changed)

    def has_changed(self) -> bool:
        """True if the file's mtime, size or inode differ from the last sync."""
        return fileutils.has_changed(self._file, self._signature)

    def reload(self, force: bool = False) -> None:
        if force:
            self.update()
            return
        try:
            due = self.should_reload()
        except InvalidSettingError:
            logger.warning("skipping reload of %s", self._file, exc_info=True)
            return
        if due:
            self.update()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _key(self, key: str) -> str:
        return f"{self.path_prefix}.{key}" if self.path_prefix else key

    def has_key(self, key: str) -> bool:
        full = self._key(key)
        self.reload()
        return self._file_data.contains_key(full)

    def single_layer_key_set(self, key: str | None = None) -> set[str]:
        full = None if key is None else self._key(key)
        self.reload()
        return self._file_data.single_layer_key_set(full)

    def key_set(self, key: str | None = None) -> set[str]:
        full = None if key is None else self._key(key)
        self.reload()
        return self._file_data.key_set(full)

    def get(self, key: str, default: Any = None) -> Any:
        full = self._key(key)
        self.reload()
        return self._file_data.get(full, default)

    def get_str(self, key: str, default: str = "") -> str:
        value = self.get(key)
        return default if value is None else str(value)

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.get(key)
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def get_float(self, key: str, default: float = 0.0) -> float:
        value = self.get(key)
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        return default

    def get_list(self, key: str, default: list[Any] | None = None) -> list[Any]:
        value = self.get(key)
        if isinstance(value, list):
            return value
        return list(default) if default is not None else []

    # ------------------------------------------------------------------
    # Mutations (each one is a write-through sync point)
    # ------------------------------------------------------------------

    def _edited_copy(self) -> FileData:
        return FileData(self._file_data.to_dict())

    def set(self, key: str, value: Any) -> None:
        full = self._key(key)
        with self._lock:
            self.reload()
            data = self._edited_copy()
            data.insert(full, value)
            self._write(data)

    def set_default(self, key: str, value: Any) -> None:
        """Set key only if it is not present yet."""
        with self._lock:
            if not self.has_key(key):
                self.set(key, value)

    def get_or_set_default(self, key: str, default: Any) -> Any:
        with self._lock:
            if self.has_key(key):
                return self._file_data.get(self._key(key))
            self.set(key, default)
            return default

    def remove(self, key: str) -> None:
        full = self._key(key)
        with self._lock:
            self.reload()
            data = self._edited_copy()
            data.remove(full)
            self._write(data)

    def clear(self) -> None:
        self._write(FileData())

    def replace(self, target: str, replacement: str) -> None:
        """Replace every literal occurrence of target on every line of the file.

        Works on the raw text: the in-memory data and the sync timestamp are
        left alone, so the change is only visible after a reload.
        """
        lines = fileutils.read_lines(self._file, self.encoding)
        fileutils.write_lines(
            self._file,
            [line.replace(target, replacement) for line in lines],
            self.encoding,
        )

    # ------------------------------------------------------------------
    # Identity: the backing path alone
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, FlatFile):
            return NotImplemented
        return self._file == other._file

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, FlatFile):
            return NotImplemented
        return self._file < other._file

    def __hash__(self) -> int:
        return hash(self._file)

    def __str__(self) -> str:
        return self.file_path

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.file_path!r})"
