"""Small filesystem helpers used by the stores.

Timestamps are integer milliseconds since the epoch. Change detection
does not compare timestamps against the wall clock: file mtimes come from
a coarser kernel clock, so an edit made right after a sync can carry an
mtime older than the sync itself. Instead the stat signature taken at the
sync point is compared for equality.
"""

from __future__ import annotations

import time
from pathlib import Path

# (st_mtime_ns, st_size, st_ino)
Signature = tuple[int, int, int]


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def file_signature(path: Path) -> Signature | None:
    """Stat fingerprint of path, or None if it does not exist."""
    try:
        st = path.stat()
    except FileNotFoundError:
        return None
    return (st.st_mtime_ns, st.st_size, st.st_ino)


def has_changed(path: Path, signature: Signature | None) -> bool:
    """True if path no longer matches signature. A missing file never has."""
    current = file_signature(path)
    if current is None:
        return False
    return current != signature


def get_and_make(path: Path) -> Path:
    """Ensure path exists as a file, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch(exist_ok=True)
    return path


def read_lines(path: Path, encoding: str = "utf-8") -> list[str]:
    """Lines of path split on \\n, \\r\\n or \\r only (not on U+2028, \\x0c, ...)."""
    with path.open(encoding=encoding, newline=None) as f:
        return [line.removesuffix("\n") for line in f]


def write_lines(path: Path, lines: list[str], encoding: str = "utf-8") -> None:
    """Overwrite path with lines, each terminated by a newline."""
    with path.open("w", encoding=encoding) as f:
        for line in lines:
            f.write(line + "\n")
