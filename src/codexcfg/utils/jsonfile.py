# JSON file helpers
import json
from pathlib import Path
from typing import Any, cast

from codexcfg.utils.atomic import write_text_atomic


def read_json_file(path: Path) -> dict[str, Any]:
    """Read JSON file with error handling.

    ABOUTME: Returns empty dict if file doesn't exist
    ABOUTME: Raises ValueError for invalid JSON or a non-object document
    """
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            result = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(result, dict):
        raise ValueError(f"Expected a JSON object in {path}")
    return cast(dict[str, Any], result)


def write_json_file(path: Path, data: dict[str, Any]) -> None:
    """Write JSON file atomically.

    ABOUTME: Creates parent directories if needed
    ABOUTME: Uses 2-space indentation and a trailing newline
    """
    write_text_atomic(path, json.dumps(data, indent=2) + "\n")
