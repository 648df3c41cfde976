"""Watch a store's backing file and reload it as soon as it changes.

FlatFile itself only reloads lazily, when a query arrives. This module is
for callers that want to react to edits right away (e.g. `flatstore watch`):

    run(store, lambda s: print(s.key_set()))

Uses inotify (inotify_simple) on Linux and falls back to mtime polling
when it is unavailable (macOS, Docker).
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from flatstore.flatfile import FlatFile

logger = logging.getLogger("flatstore.watcher")

_INOTIFY_TIMEOUT_MS = 1000


def _notify(store: FlatFile, on_change: Callable[[FlatFile], None]) -> None:
    try:
        store.reload(force=True)
        logger.info("reloaded: %s", store.file_path)
        on_change(store)
    except Exception:
        logger.exception("failed to reload: %s", store.file_path)


def poll_once(store: FlatFile, on_change: Callable[[FlatFile], None] | None = None) -> bool:
    """Reload store if its file changed since the last sync. Returns True if it did."""
    if not store.has_changed():
        return False
    _notify(store, on_change or (lambda _store: None))
    return True


# ---------------------------------------------------------------------------
# inotify watcher
# ---------------------------------------------------------------------------

def watch_inotify(store: FlatFile, on_change: Callable[[FlatFile], None]) -> None:
    """Watch using inotify_simple (Linux). Blocks forever.

    The parent directory is watched rather than the file, so editors that
    save by writing a temp file and renaming it over the original are seen.
    """
    import inotify_simple  # type: ignore[import]

    inotify = inotify_simple.INotify()
    flags = inotify_simple.flags  # type: ignore[attr-defined]

    directory = store.file.absolute().parent
    inotify.add_watch(str(directory), flags.CLOSE_WRITE | flags.MOVED_TO)
    logger.info("inotify watching %s", store.file_path)

    while True:
        for event in inotify.read(timeout=_INOTIFY_TIMEOUT_MS):
            if event.name == store.name:
                _notify(store, on_change)


# ---------------------------------------------------------------------------
# Polling fallback
# ---------------------------------------------------------------------------

def watch_poll(
    store: FlatFile,
    on_change: Callable[[FlatFile], None],
    interval: float = 1.0,
    max_polls: int | None = None,
) -> None:
    """Check the file's mtime every interval seconds. Blocks unless max_polls is set."""
    logger.info("polling %s interval=%.1fs", store.file_path, interval)
    polls = 0
    while max_polls is None or polls < max_polls:
        poll_once(store, on_change)
        polls += 1
        time.sleep(interval)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def run(store: FlatFile, on_change: Callable[[FlatFile], None], interval: float = 1.0) -> None:
    try:
        watch_inotify(store, on_change)
    except ImportError:
        logger.warning("inotify_simple not available, falling back to polling")
        watch_poll(store, on_change, interval=interval)
