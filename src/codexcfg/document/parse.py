# Parse raw Codex config text into a CodexConfig
import logging
import re

import tomli

from codexcfg.document.collect import collect_unmanaged_lines
from codexcfg.document.directives import scan_model_provider, scan_root_model
from codexcfg.document.extract import ConfigShapeError, extract_entities
from codexcfg.document.fallback import fallback_config
from codexcfg.document.markers import MODEL_PROVIDER_KEY
from codexcfg.models import CodexConfig

logger = logging.getLogger(__name__)

# ABOUTME: Windows installs write SYSTEMROOT = "C:\Windows", an invalid TOML escape
SYSTEMROOT_PATTERN = re.compile(r'(SYSTEMROOT\s*=\s*")([^"\n]+)(")')


def _normalize_systemroot(content: str) -> str:
    return SYSTEMROOT_PATTERN.sub(
        lambda m: m.group(1) + re.sub(r"\\+", "/", m.group(2)) + m.group(3),
        content,
    )


def parse_config(content: str) -> CodexConfig:
    """Parse config.toml text into managed state plus passthrough lines.

    ABOUTME: tomli builds the tree for providers, MCP servers and root model
    ABOUTME: Line scanners resolve model_provider and collect unmanaged lines
    ABOUTME: Malformed input degrades to an unmanaged-only document, never raises

    Args:
        content: Raw config.toml text

    Returns:
        CodexConfig built from the text

    Examples:
        >>> config = parse_config('model = "gpt-5"\\n[features]\\nweb = true\\n')
        >>> config.model, config.unmanaged_lines
        ('gpt-5', ['[features]', 'web = true'])
    """
    if not content.strip():
        return CodexConfig()

    try:
        data = tomli.loads(_normalize_systemroot(content))
        config = extract_entities(data)
    except (tomli.TOMLDecodeError, ConfigShapeError) as e:
        logger.debug(f"TOML parsing failed, falling back to line filtering: {e}")
        return fallback_config(content)

    if config.model is None:
        config.model = scan_root_model(content)

    model_provider, commented = scan_model_provider(content)
    if model_provider is None:
        root_value = data.get(MODEL_PROVIDER_KEY)
        if isinstance(root_value, str) and root_value:
            model_provider = root_value
        commented = False

    config.model_provider = model_provider
    config.model_provider_commented = commented
    config.unmanaged_lines = collect_unmanaged_lines(content)
    return config
