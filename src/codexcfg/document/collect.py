# ABOUTME: Collects the lines of a config that codexcfg does not manage.
# ABOUTME: Those lines are replayed verbatim by the assembler.
from collections.abc import Iterable

from codexcfg.document.markers import (
    ANY_MODEL_PROVIDER_PATTERN,
    COMMENTED_MODEL_PROVIDER_PATTERN,
    MANAGED_DOTTED_KEY_PATTERN,
    MCP_SENTINEL_PATTERN,
    MODEL_LINE_PATTERN,
    PROVIDER_SENTINEL_PATTERN,
    LineKind,
    ValueTracker,
    classify_line,
    is_managed_section,
    section_name,
)


def filter_unmanaged_lines(lines: Iterable[str]) -> list[str]:
    """Keep only the lines that belong to no managed section or field.

    ABOUTME: Skips whole [model_providers.*] and [mcp_servers.*] sections
    ABOUTME: Drops sentinels, model_provider directives, and the root model line
    ABOUTME: Drops blank lines, the assembler re-inserts spacing itself
    ABOUTME: Lines continuing a multi-line value follow the line that opened it
    ABOUTME: Idempotent: filtering already-filtered lines changes nothing

    Args:
        lines: Raw lines in source order

    Returns:
        Lines to preserve, in source order, unmodified
    """
    kept: list[str] = []
    tracker = ValueTracker()
    keep_value = False
    skip_section = False
    # Root context, closed by a header and reopened by the provider sentinel
    in_section = False

    for line in lines:
        if tracker.feed(line):
            if keep_value:
                kept.append(line)
            continue

        kind = classify_line(line)
        keep = True

        if kind is LineKind.BLANK:
            keep = False
        elif kind is LineKind.SECTION_HEADER:
            in_section = True
            skip_section = is_managed_section(section_name(line) or "")
            keep = not skip_section
        elif kind is LineKind.COMMENT and (
            PROVIDER_SENTINEL_PATTERN.match(line)
            or MCP_SENTINEL_PATTERN.match(line)
            or COMMENTED_MODEL_PROVIDER_PATTERN.match(line)
        ):
            if PROVIDER_SENTINEL_PATTERN.match(line):
                in_section = False
            keep = False
        elif skip_section:
            keep = False
        elif kind is LineKind.FIELD and not in_section:
            keep = not (
                ANY_MODEL_PROVIDER_PATTERN.match(line)
                or MODEL_LINE_PATTERN.match(line)
                or MANAGED_DOTTED_KEY_PATTERN.match(line)
            )

        keep_value = keep
        if keep:
            kept.append(line)

    return kept


def collect_unmanaged_lines(content: str) -> list[str]:
    """Collect unmanaged lines from raw config text."""
    return filter_unmanaged_lines(content.splitlines())
