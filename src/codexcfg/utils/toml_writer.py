# Minimal TOML value formatter for codexcfg
import math
import re
from datetime import date, datetime, time
from typing import Any

# ABOUTME: Keys matching this pattern can be written without quotes
BARE_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

_BACKSLASH_RUN = re.compile(r"\\+")

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def normalize_toml_path(value: str) -> str:
    """Convert Windows path separators to forward slashes.

    ABOUTME: Each run of backslashes becomes a single '/'
    ABOUTME: Forward slashes are left alone so URLs keep their '//'

    Examples:
        >>> normalize_toml_path("C:\\\\Tools\\\\node.exe")
        'C:/Tools/node.exe'
    """
    return _BACKSLASH_RUN.sub("/", value)


def _escape_basic(value: str) -> str:
    out: list[str] = []
    for char in value:
        if char in _ESCAPES:
            out.append(_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            out.append(f"\\u{ord(char):04X}")
        else:
            out.append(char)
    return "".join(out)


def format_string(value: str) -> str:
    """Format a basic (double-quoted) TOML string."""
    return f'"{_escape_basic(value)}"'


def format_literal_string(value: str) -> str:
    """Format a literal (single-quoted) TOML string.

    ABOUTME: Literal strings cannot hold quotes or control characters other
    ABOUTME: than tab, those fall back to an escaped basic string
    """
    if "'" in value or any(
        (ord(char) < 0x20 and char != "\t") or ord(char) == 0x7F for char in value
    ):
        return format_string(value)
    return f"'{value}'"


def format_key(key: str) -> str:
    if BARE_KEY_PATTERN.match(key):
        return key
    return format_string(key)


def format_value(value: Any, normalize_paths: bool = True) -> str:
    """Format a Python value as TOML inline syntax.

    ABOUTME: Recurses through lists (arrays) and dicts (inline tables)
    ABOUTME: None entries are dropped from arrays and tables
    ABOUTME: bool is checked before int since bool subclasses int

    Args:
        value: Value to format (must not be None at top level)
        normalize_paths: Convert backslashes in strings to '/'

    Returns:
        TOML text for the value
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "nan"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        return repr(value)
    if isinstance(value, str):
        if normalize_paths:
            value = normalize_toml_path(value)
        return format_string(value)
    if isinstance(value, datetime | date | time):
        return value.isoformat()
    if isinstance(value, list):
        return _format_array(value, normalize_paths)
    if isinstance(value, dict):
        return _format_inline_table(value, normalize_paths)
    raise TypeError(f"Unsupported TOML value type: {type(value).__name__}")


def format_field(key: str, value: Any, normalize_paths: bool = True) -> str | None:
    """Format a `key = value` line, or None when value is None."""
    if value is None:
        return None
    return f"{format_key(key)} = {format_value(value, normalize_paths)}"


def format_env_table(env: dict[str, Any]) -> str:
    """Format env vars as an inline table of literal strings.

    ABOUTME: Values stay single-quoted and un-normalized so Windows paths
    ABOUTME: survive without double escaping
    """
    pairs = []
    for key, value in env.items():
        if value is None:
            continue
        if isinstance(value, str):
            formatted = format_literal_string(value)
        else:
            formatted = format_value(value, normalize_paths=False)
        pairs.append(f"{format_key(key)} = {formatted}")
    return "{" + ", ".join(pairs) + "}"


def _format_array(items: list[Any], normalize_paths: bool = True) -> str:
    """Format list as TOML array.

    ABOUTME: Converts Python list to ["item1", "item2"] format
    """
    formatted_items = [
        format_value(item, normalize_paths) for item in items if item is not None
    ]
    return "[" + ", ".join(formatted_items) + "]"


def _format_inline_table(data: dict[str, Any], normalize_paths: bool = True) -> str:
    """Format dict as TOML inline table.

    ABOUTME: Converts {"k": "v"} to {k = "v"} format
    """
    pairs = [
        f"{format_key(key)} = {format_value(value, normalize_paths)}"
        for key, value in data.items()
        if value is not None
    ]
    return "{" + ", ".join(pairs) + "}"
