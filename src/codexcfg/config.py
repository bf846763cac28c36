# Settings store for codexcfg
from dataclasses import dataclass
from pathlib import Path

from codexcfg import __version__
from codexcfg.utils.jsonfile import read_json_file, write_json_file

# ABOUTME: Default config directory in user's home
CONFIG_DIR = Path.home() / ".codexcfg"

# ABOUTME: Settings file location (JSON format)
CONFIG_FILE = CONFIG_DIR / "config.json"


@dataclass
class Settings:
    """codexcfg's own persisted state.

    ABOUTME: env_key_migrated gates the one-time env_key migration
    """
    version: str = __version__
    env_key_migrated: bool = False


def get_config_path() -> Path:
    """Return the path to the codexcfg settings file.

    ABOUTME: Returns ~/.codexcfg/config.json
    ABOUTME: File may not exist yet - use ensure_config_dir() first
    """
    return CONFIG_FILE


def ensure_config_dir() -> Path:
    """Create config directory if it doesn't exist."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return CONFIG_DIR


def load_settings(path: Path) -> Settings:
    """Load settings from JSON file.

    ABOUTME: Missing file yields default settings
    ABOUTME: Fail-fast on malformed JSON with a clear error message

    Args:
        path: Path to config.json

    Returns:
        Parsed Settings

    Raises:
        ValueError: If JSON is invalid or sections have the wrong type
    """
    data = read_json_file(path)

    meta = data.get("codexcfg", {})
    codex = data.get("codex", {})
    if not isinstance(meta, dict) or not isinstance(codex, dict):
        raise ValueError(f"Sections 'codexcfg' and 'codex' must be objects in {path}")

    return Settings(
        version=str(meta.get("version", __version__)),
        env_key_migrated=bool(codex.get("envKeyMigrated", False)),
    )


def save_settings(path: Path, settings: Settings) -> None:
    """Save settings to JSON file.

    ABOUTME: Preserves unknown keys already in the file
    ABOUTME: Creates parent directory if needed
    """
    data = read_json_file(path)

    data.setdefault("codexcfg", {})["version"] = settings.version
    data.setdefault("codex", {})["envKeyMigrated"] = settings.env_key_migrated

    write_json_file(path, data)


def mark_env_key_migrated(path: Path) -> None:
    """Persist the "env_key migration done" flag."""
    settings = load_settings(path)
    settings.env_key_migrated = True
    save_settings(path, settings)
