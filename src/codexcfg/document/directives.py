# ABOUTME: Line-oriented resolution of the root-level model_provider and model keys.
# ABOUTME: Needed because tomli hides commented directives and attaches late root keys to sections.
import re
from collections.abc import Iterator

from codexcfg.document.markers import (
    ACTIVE_MODEL_PROVIDER_PATTERN,
    COMMENTED_MODEL_PROVIDER_PATTERN,
    MODEL_KEY,
    PROVIDER_SENTINEL_PATTERN,
    LineKind,
    ValueTracker,
    classify_line,
)

ROOT_MODEL_PATTERN = re.compile(rf'^\s*{MODEL_KEY}\s*=\s*"([^"]*)"')


def _statements(content: str) -> Iterator[tuple[str, LineKind, bool]]:
    """Yield (line, kind, in_section) for every line that starts a statement.

    ABOUTME: Continuation lines of multi-line values are skipped
    ABOUTME: A header opens a section, the provider sentinel closes it again
    """
    tracker = ValueTracker()
    in_section = False
    for line in content.splitlines():
        if tracker.feed(line):
            continue
        kind = classify_line(line)
        if kind is LineKind.SECTION_HEADER:
            in_section = True
        elif kind is LineKind.COMMENT and PROVIDER_SENTINEL_PATTERN.match(line):
            in_section = False
        yield line, kind, in_section


def scan_model_provider(content: str) -> tuple[str | None, bool]:
    """Find the default provider directive in raw config text.

    ABOUTME: A commented directive anywhere wins over any active one
    ABOUTME: An active directive only counts outside [sections]
    ABOUTME: The provider sentinel comment closes the preceding section

    Args:
        content: Raw config.toml text

    Returns:
        (provider id or None, True if the directive is commented out)

    Examples:
        >>> scan_model_provider('# model_provider = "acme"\\nmodel_provider = "x"')
        ('acme', True)
        >>> scan_model_provider('[features]\\nmodel_provider = "x"')
        (None, False)
    """
    active: str | None = None

    for line, kind, in_section in _statements(content):
        commented = COMMENTED_MODEL_PROVIDER_PATTERN.match(line)
        if commented:
            return commented.group(1), True

        if active is None and kind is LineKind.FIELD and not in_section:
            match = ACTIVE_MODEL_PROVIDER_PATTERN.match(line)
            if match:
                active = match.group(1)

    return active, False


def scan_root_model(content: str) -> str | None:
    """Find the first root-level `model = "..."` line, same context rules as above."""
    for line, kind, in_section in _statements(content):
        if kind is LineKind.FIELD and not in_section:
            match = ROOT_MODEL_PATTERN.match(line)
            if match and match.group(1):
                return match.group(1)
    return None
