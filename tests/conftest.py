import os
import time
from pathlib import Path

import pytest

from flatstore.models import ReloadSettings
from flatstore.stores import Yaml


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("FLATSTORE_RELOAD", raising=False)
    monkeypatch.delenv("FLATSTORE_LOG_LEVEL", raising=False)


def bump_mtime(path: Path, seconds: float = 10.0) -> None:
    """Push path's mtime into the future so it differs from any recorded sync."""
    t = time.time() + seconds
    os.utime(path, (t, t))


@pytest.fixture
def nested_yaml(tmp_path):
    path = tmp_path / "settings.yml"
    path.write_text(
        "a: 1\n"
        "b:\n"
        "  c: 2\n"
        "  d:\n"
        "    e: 3\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def manual_store(nested_yaml):
    return Yaml(nested_yaml, reload_settings=ReloadSettings.MANUAL)
