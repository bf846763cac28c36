# Best-effort handling of config text tomli cannot parse
import re

from codexcfg.models import CodexConfig

_STRIP_PATTERNS = [
    re.compile(r"^\s*#\s*---\s*model provider added by codexcfg\s*---\s*$", re.I | re.M),
    re.compile(r"^\s*#\s*---\s*MCP servers added by codexcfg\s*---\s*$", re.I | re.M),
    # Whole managed sections, up to the next header or end of text
    re.compile(r"^\s*\[\s*model_providers\b[^\]\n]*\][\s\S]*?(?=^\s*\[|\Z)", re.M),
    re.compile(r"^\s*\[\s*mcp_servers\b[^\]\n]*\][\s\S]*?(?=^\s*\[|\Z)", re.M),
    re.compile(r"^\s*(?:#\s*)?model_provider\s*=.*$", re.M),
    re.compile(r"^\s*model\s*=.*$", re.M),
]


def fallback_config(content: str) -> CodexConfig:
    """Treat unparseable text as entirely unmanaged.

    ABOUTME: Strips anything that looks like a managed block or global field
    ABOUTME: Everything else becomes unmanaged_lines, right-stripped, blanks dropped
    ABOUTME: Never raises, this is the parser's last resort
    """
    cleaned = content
    for pattern in _STRIP_PATTERNS:
        cleaned = pattern.sub("", cleaned)

    lines = [line.rstrip() for line in cleaned.splitlines()]
    return CodexConfig(unmanaged_lines=[line for line in lines if line.strip()])
