# ABOUTME: Credential store for Codex (~/.codex/auth.json)
# ABOUTME: Maps env var names (a provider's temp_env_key) to secret values
from pathlib import Path

from codexcfg.utils.jsonfile import read_json_file, write_json_file

# ABOUTME: Key Codex itself reads; None means "use official login"
OPENAI_API_KEY = "OPENAI_API_KEY"


def get_auth_path() -> Path:
    return Path.home() / ".codex" / "auth.json"


def load_credentials(path: Path) -> dict[str, str | None]:
    """Load credentials, returning {} when auth.json doesn't exist."""
    return read_json_file(path)


def update_credentials(path: Path, entries: dict[str, str | None]) -> dict[str, str | None]:
    """Merge entries into auth.json and return the merged mapping.

    ABOUTME: Existing keys not in entries are preserved
    ABOUTME: None values are written as JSON null
    """
    merged = {**load_credentials(path), **entries}
    write_json_file(path, merged)
    return merged
