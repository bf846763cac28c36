# ABOUTME: Shared markers and line patterns for the config document engine.
# ABOUTME: The assembler writes these sentinels and the scanners read them back.
import enum
import re

PROVIDERS_TABLE = "model_providers"
MCP_SERVERS_TABLE = "mcp_servers"
MODEL_KEY = "model"
MODEL_PROVIDER_KEY = "model_provider"

LEGACY_ENV_KEY_FIELD = "env_key"
ENV_KEY_FIELD = "temp_env_key"

PROVIDER_SENTINEL = "# --- model provider added by codexcfg ---"
MCP_SENTINEL = "# --- MCP servers added by codexcfg ---"

PROVIDER_SENTINEL_PATTERN = re.compile(
    r"^\s*#\s*---\s*model provider added by codexcfg\s*---\s*$", re.IGNORECASE
)
MCP_SENTINEL_PATTERN = re.compile(
    r"^\s*#\s*---\s*MCP servers added by codexcfg\s*---\s*$", re.IGNORECASE
)

_KEY = r"""(?:[A-Za-z0-9_-]+|"(?:[^"\\]|\\.)*"|'[^'\n]*')"""
_KEY_PATH = rf"{_KEY}(?:\s*\.\s*{_KEY})*"

# [table] or [[array.of.tables]] on a line of its own, group 1 is the key path
SECTION_HEADER_PATTERN = re.compile(rf"^\s*\[\[?\s*({_KEY_PATH})\s*\]\]?\s*(?:#.*)?$")

MANAGED_SECTION_PATTERN = re.compile(
    rf"""^(["']?)(?:{PROVIDERS_TABLE}|{MCP_SERVERS_TABLE})\1\s*(?:\.|$)"""
)

# Root-level dotted keys such as `mcp_servers.foo.command = "x"`
MANAGED_DOTTED_KEY_PATTERN = re.compile(
    rf"^\s*(?:{PROVIDERS_TABLE}|{MCP_SERVERS_TABLE})\s*\."
)

COMMENTED_MODEL_PROVIDER_PATTERN = re.compile(
    rf'^\s*#\s*{MODEL_PROVIDER_KEY}\s*=\s*"([^"]+)"'
)
ACTIVE_MODEL_PROVIDER_PATTERN = re.compile(
    rf'^\s*{MODEL_PROVIDER_KEY}\s*=\s*"([^"]+)"'
)
# Any directive line, commented or not, with or without a parseable value
ANY_MODEL_PROVIDER_PATTERN = re.compile(rf"^\s*#?\s*{MODEL_PROVIDER_KEY}\s*=")
MODEL_LINE_PATTERN = re.compile(rf"^\s*{MODEL_KEY}\s*=")


class LineKind(enum.Enum):
    """Position class of a raw line."""
    BLANK = "blank"
    COMMENT = "comment"
    SECTION_HEADER = "section_header"
    FIELD = "field"


def classify_line(line: str) -> LineKind:
    stripped = line.strip()
    if not stripped:
        return LineKind.BLANK
    if stripped.startswith("#"):
        return LineKind.COMMENT
    if section_name(stripped) is not None:
        return LineKind.SECTION_HEADER
    return LineKind.FIELD


def section_name(line: str) -> str | None:
    """Return the dotted path of a section header line, else None."""
    match = SECTION_HEADER_PATTERN.match(line)
    if match is None:
        return None
    return match.group(1)


def is_managed_section(name: str) -> bool:
    return MANAGED_SECTION_PATTERN.match(name) is not None


class ValueTracker:
    """Follows values that span lines: arrays, inline tables and triple-quoted strings.

    ABOUTME: feed() every line in order, it reports whether the line continues
    ABOUTME: a value opened on an earlier line
    ABOUTME: Such lines are never headers, directives or fields of their own
    """

    def __init__(self) -> None:
        self.depth = 0
        self.string: str | None = None

    @property
    def is_open(self) -> bool:
        return self.depth > 0 or self.string is not None

    def feed(self, line: str) -> bool:
        continued = self.is_open
        self._scan(line)
        return continued

    def _scan(self, line: str) -> None:
        i = 0
        while i < len(line):
            if self.string is not None:
                i = self._close_string(line, i)
                continue

            char = line[i]
            if char == "#":
                return
            if char in "\"'":
                if line.startswith(char * 3, i):
                    self.string = char * 3
                    i += 3
                    continue
                i = _skip_inline_string(line, i)
                continue
            if char in "[{":
                self.depth += 1
            elif char in "]}":
                self.depth = max(0, self.depth - 1)
            i += 1

    def _close_string(self, line: str, i: int) -> int:
        delimiter = self.string
        while i < len(line):
            if delimiter == '"""' and line[i] == "\\":
                i += 2
                continue
            if line.startswith(delimiter, i):
                # Up to two quotes may sit right before the closing delimiter
                end = i + 3
                while end < len(line) and line[end] == delimiter[0] and end - i < 5:
                    end += 1
                self.string = None
                return end
            i += 1
        return i


def _skip_inline_string(line: str, start: int) -> int:
    quote = line[start]
    i = start + 1
    while i < len(line):
        if quote == '"' and line[i] == "\\":
            i += 2
            continue
        if line[i] == quote:
            return i + 1
        i += 1
    return i
