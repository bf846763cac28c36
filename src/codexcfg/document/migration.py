# ABOUTME: One-time rename of the legacy env_key provider field to temp_env_key.
# ABOUTME: Pure text transform, the file layer handles gating, backups and writes.
import re

from codexcfg.document.markers import ENV_KEY_FIELD, LEGACY_ENV_KEY_FIELD, ValueTracker

LEGACY_FIELD_PATTERN = re.compile(rf"^\s*{LEGACY_ENV_KEY_FIELD}\s*=")
_LEGACY_LINE_PATTERN = re.compile(rf"^(\s*){LEGACY_ENV_KEY_FIELD}(\s*=.*)$", re.DOTALL)
_NEW_FIELD_PATTERN = re.compile(rf"^\s*{ENV_KEY_FIELD}\s*=")
_SECTION_PATTERN = re.compile(r"^\s*\[([^\]]+)\]")

# Key used for lines that appear before any section header
ROOT_SECTION = ""


def needs_migration(content: str) -> bool:
    """Return True if any line still declares the legacy env_key field."""
    tracker = ValueTracker()
    return any(
        not tracker.feed(line) and LEGACY_FIELD_PATTERN.match(line)
        for line in content.split("\n")
    )


def _sections_with_new_field(lines: list[str]) -> set[str]:
    sections: set[str] = set()
    current = ROOT_SECTION
    tracker = ValueTracker()
    for line in lines:
        if tracker.feed(line):
            continue
        match = _SECTION_PATTERN.match(line)
        if match:
            current = match.group(1)
        elif _NEW_FIELD_PATTERN.match(line):
            sections.add(current)
    return sections


def migrate_env_key(content: str) -> str:
    """Rename env_key to temp_env_key in every section.

    ABOUTME: Pass 1 finds sections that already declare temp_env_key
    ABOUTME: Pass 2 deletes env_key there and renames it everywhere else
    ABOUTME: Indentation, the rest of the line and line endings are preserved
    ABOUTME: Lines inside multi-line values are left alone
    ABOUTME: Idempotent: output has no env_key field line left to rename

    Args:
        content: Raw config.toml text

    Returns:
        Migrated text (unchanged if there is nothing to migrate)

    Examples:
        >>> migrate_env_key('[model_providers.a]\\n  env_key = "A_KEY"\\n')
        '[model_providers.a]\\n  temp_env_key = "A_KEY"\\n'
    """
    lines = content.split("\n")
    has_new_field = _sections_with_new_field(lines)

    result: list[str] = []
    current = ROOT_SECTION
    tracker = ValueTracker()
    for line in lines:
        if tracker.feed(line):
            result.append(line)
            continue

        section = _SECTION_PATTERN.match(line)
        if section:
            current = section.group(1)

        legacy = _LEGACY_LINE_PATTERN.match(line)
        if legacy:
            if current in has_new_field:
                continue
            result.append(f"{legacy.group(1)}{ENV_KEY_FIELD}{legacy.group(2)}")
            continue

        result.append(line)

    return "\n".join(result)
