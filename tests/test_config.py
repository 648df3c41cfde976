import pytest

from flatstore.config import init_config, load_config
from flatstore.errors import InvalidSettingError
from flatstore.models import FileType, ReloadSettings


def test_defaults_without_file(tmp_path):
    cfg = load_config(tmp_path)
    assert cfg.root == tmp_path
    assert cfg.reload is ReloadSettings.INTELLIGENT
    assert cfg.path_prefix is None
    assert cfg.default_format is FileType.YAML
    assert cfg.watch.interval == 1.0
    assert cfg.logging.level == "INFO"


def test_reads_file(tmp_path):
    (tmp_path / "flatstore.toml").write_text(
        '[flatstore]\nreload = "manual"\npath_prefix = "app"\ndefault_format = "json"\n'
        "[watch]\ninterval = 0.25\n"
        '[logging]\nlevel = "debug"\n'
    )
    cfg = load_config(tmp_path)
    assert cfg.reload is ReloadSettings.MANUAL
    assert cfg.path_prefix == "app"
    assert cfg.default_format is FileType.JSON
    assert cfg.watch.interval == 0.25
    assert cfg.logging.level == "DEBUG"
    assert cfg.config_path == tmp_path / "flatstore.toml"


def test_searches_upward(tmp_path):
    (tmp_path / "flatstore.toml").write_text('[flatstore]\nreload = "automatic"\n')
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    cfg = load_config(nested)
    assert cfg.root == tmp_path
    assert cfg.reload is ReloadSettings.AUTOMATIC


def test_cwd_is_default_root(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_config().root == tmp_path.resolve()


def test_environment_overrides(tmp_path, monkeypatch):
    (tmp_path / "flatstore.toml").write_text('[flatstore]\nreload = "manual"\n')
    monkeypatch.setenv("FLATSTORE_RELOAD", "automatically")
    monkeypatch.setenv("FLATSTORE_LOG_LEVEL", "warning")
    cfg = load_config(tmp_path)
    assert cfg.reload is ReloadSettings.AUTOMATIC
    assert cfg.logging.level == "WARNING"


def test_invalid_reload_setting(tmp_path):
    (tmp_path / "flatstore.toml").write_text('[flatstore]\nreload = "sometimes"\n')
    with pytest.raises(InvalidSettingError):
        load_config(tmp_path)


def test_init_config(tmp_path):
    path = init_config(tmp_path)
    assert path == tmp_path / "flatstore.toml"
    assert load_config(tmp_path).reload is ReloadSettings.INTELLIGENT
    with pytest.raises(FileExistsError):
        init_config(tmp_path)
