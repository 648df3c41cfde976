"""StoreConfig: project-local defaults for opening flat files.

Looked up as flatstore.toml in the working directory or any parent:

    [flatstore]
    reload = "intelligent"   # automatic | intelligent | manual
    path_prefix = ""         # empty = no prefix
    default_format = "yaml"  # used for paths without an extension

    [watch]
    interval = 1.0           # seconds between polls when inotify is unavailable

    [logging]
    level = "INFO"

Environment overrides: FLATSTORE_RELOAD, FLATSTORE_LOG_LEVEL.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from flatstore.models import FileType, ReloadSettings

_CONFIG_FILENAME = "flatstore.toml"
_DEFAULT_INTERVAL = 1.0
_DEFAULT_LOG_LEVEL = "INFO"


@dataclass
class WatchConfig:
    interval: float = _DEFAULT_INTERVAL


@dataclass
class LoggingConfig:
    level: str = _DEFAULT_LOG_LEVEL


@dataclass
class StoreConfig:
    """Resolved configuration for a flatstore project."""

    root: Path                       # directory that contains flatstore.toml (or cwd)
    reload: ReloadSettings = ReloadSettings.INTELLIGENT
    path_prefix: str | None = None
    default_format: FileType = FileType.YAML
    watch: WatchConfig = field(default_factory=WatchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def config_path(self) -> Path:
        return self.root / _CONFIG_FILENAME


def load_config(root: Path | str | None = None) -> StoreConfig:
    """Load flatstore.toml from root (or search upward from cwd if root is None)."""
    root_path = _find_root(Path(root) if root else Path.cwd())
    config_path = root_path / _CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_path.exists():
        with config_path.open("rb") as f:
            raw = tomllib.load(f)

    store_section = raw.get("flatstore", {})
    watch_section = raw.get("watch", {})
    log_section = raw.get("logging", {})

    reload_text = os.environ.get("FLATSTORE_RELOAD") or str(store_section.get("reload", "intelligent"))
    log_level = os.environ.get("FLATSTORE_LOG_LEVEL") or str(log_section.get("level", _DEFAULT_LOG_LEVEL))

    return StoreConfig(
        root=root_path,
        reload=ReloadSettings.parse(reload_text),
        path_prefix=store_section.get("path_prefix") or None,
        default_format=FileType.parse(str(store_section.get("default_format", "yaml"))),
        watch=WatchConfig(
            interval=float(watch_section.get("interval", _DEFAULT_INTERVAL)),
        ),
        logging=LoggingConfig(level=log_level.upper()),
    )


def _find_root(start: Path) -> Path:
    """Walk upward from start looking for flatstore.toml."""
    for directory in (start, *start.parents):
        if (directory / _CONFIG_FILENAME).exists():
            return directory
    return start


def init_config(root: Path) -> Path:
    """Write a default flatstore.toml at root. Raises if already exists."""
    config_path = root / _CONFIG_FILENAME
    if config_path.exists():
        msg = f"{_CONFIG_FILENAME} already exists at {config_path}"
        raise FileExistsError(msg)

    content = """\
[flatstore]
reload = "intelligent"   # automatic | intelligent | manual
# path_prefix = ""       # prepended (with a dot) to every key
# default_format = "yaml"

# [watch]
# interval = 1.0         # seconds between polls when inotify is unavailable

# [logging]
# level = "INFO"
"""
    config_path.write_text(content)
    return config_path
