# Tests for the codexcfg settings store
import json

import pytest

from codexcfg import __version__
from codexcfg.config import (
    CONFIG_FILE,
    Settings,
    ensure_config_dir,
    get_config_path,
    load_settings,
    mark_env_key_migrated,
    save_settings,
)


def test_get_config_path():
    """Test getting settings file path."""
    path = get_config_path()
    assert path == CONFIG_FILE
    assert path.name == "config.json"
    assert path.parent.name == ".codexcfg"


def test_ensure_config_dir(tmp_path, monkeypatch):
    """Test creating the settings directory."""
    target = tmp_path / ".codexcfg"
    monkeypatch.setattr("codexcfg.config.CONFIG_DIR", target)

    assert ensure_config_dir() == target
    assert target.is_dir()
    assert ensure_config_dir() == target


def test_load_missing_file(tmp_path):
    """Test that a missing settings file gives defaults."""
    settings = load_settings(tmp_path / "config.json")
    assert settings == Settings(version=__version__, env_key_migrated=False)


def test_load_existing_file(tmp_path):
    """Test reading the migration flag."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"codexcfg": {"version": "0.0.9"}, "codex": {"envKeyMigrated": True}}))

    settings = load_settings(path)

    assert settings.version == "0.0.9"
    assert settings.env_key_migrated is True


def test_load_invalid_json(tmp_path):
    """Test that malformed JSON fails fast."""
    path = tmp_path / "config.json"
    path.write_text("{not json")

    with pytest.raises(ValueError, match="Invalid JSON"):
        load_settings(path)


def test_load_wrong_section_type(tmp_path):
    """Test that sections must be objects."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"codex": []}))

    with pytest.raises(ValueError, match="must be objects"):
        load_settings(path)


def test_save_preserves_unknown_keys(tmp_path):
    """Test that saving keeps keys codexcfg doesn't own."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"theme": "dark", "codex": {"other": 1}}))

    save_settings(path, Settings(version="0.1.0", env_key_migrated=True))

    data = json.loads(path.read_text())
    assert data == {
        "theme": "dark",
        "codexcfg": {"version": "0.1.0"},
        "codex": {"other": 1, "envKeyMigrated": True},
    }


def test_save_creates_parent_dir(tmp_path):
    """Test that the settings directory is created on save."""
    path = tmp_path / "nested" / "config.json"
    save_settings(path, Settings())
    assert path.exists()
    assert path.read_text().endswith("\n")


def test_mark_env_key_migrated(tmp_path):
    """Test persisting the migration flag."""
    path = tmp_path / "config.json"
    assert load_settings(path).env_key_migrated is False

    mark_env_key_migrated(path)

    assert load_settings(path).env_key_migrated is True
