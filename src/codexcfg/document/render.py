# Render a CodexConfig back to config.toml text
from codexcfg.document.collect import filter_unmanaged_lines
from codexcfg.document.extract import KNOWN_MCP_FIELDS, KNOWN_PROVIDER_FIELDS
from codexcfg.document.markers import (
    MCP_SENTINEL,
    MCP_SERVERS_TABLE,
    MODEL_KEY,
    MODEL_PROVIDER_KEY,
    PROVIDER_SENTINEL,
    PROVIDERS_TABLE,
)
from codexcfg.models import CodexConfig, McpService, Provider
from codexcfg.utils.toml_writer import (
    format_env_table,
    format_field,
    format_key,
    format_string,
    format_value,
    normalize_toml_path,
)


def _global_lines(config: CodexConfig) -> list[str | None]:
    lines: list[str | None] = [PROVIDER_SENTINEL]
    if config.model:
        lines.append(f"{MODEL_KEY} = {format_string(config.model)}")
    if config.model_provider:
        prefix = "# " if config.model_provider_commented else ""
        lines.append(f"{prefix}{MODEL_PROVIDER_KEY} = {format_string(config.model_provider)}")
    lines.append(None)
    return lines


def _extra_lines(extra_fields: dict | None, known: frozenset[str]) -> list[str]:
    lines: list[str] = []
    for key, value in (extra_fields or {}).items():
        if key in known:
            continue
        formatted = format_field(key, value)
        if formatted is not None:
            lines.append(formatted)
    return lines


def render_provider(provider: Provider) -> list[str]:
    """Render one [model_providers.<id>] section.

    ABOUTME: Field order is fixed: name, base_url, wire_api, temp_env_key,
    ABOUTME: requires_openai_auth, then model and any extra fields
    """
    lines = [
        f"[{PROVIDERS_TABLE}.{format_key(provider.id)}]",
        f"name = {format_string(provider.name)}",
        f"base_url = {format_string(provider.base_url)}",
        f"wire_api = {format_string(provider.wire_api)}",
        f"temp_env_key = {format_string(provider.temp_env_key)}",
        f"requires_openai_auth = {format_value(provider.requires_openai_auth)}",
    ]
    if provider.model:
        lines.append(f"model = {format_string(provider.model)}")
    lines.extend(_extra_lines(provider.extra_fields, KNOWN_PROVIDER_FIELDS))
    return lines


def render_mcp_service(service: McpService) -> list[str]:
    """Render one [mcp_servers.<id>] section.

    ABOUTME: command and args are path-normalized, env values stay literal
    ABOUTME: Extra fields follow the known ones in insertion order
    """
    lines = [f"[{MCP_SERVERS_TABLE}.{format_key(service.id)}]"]
    if service.command is not None:
        lines.append(f"command = {format_string(normalize_toml_path(service.command))}")
    if service.command is not None or service.args:
        lines.append(f"args = {format_value(service.args)}")
    if service.env:
        lines.append(f"env = {format_env_table(service.env)}")
    if service.startup_timeout_sec is not None:
        lines.append(f"startup_timeout_sec = {format_value(service.startup_timeout_sec)}")
    lines.extend(_extra_lines(service.extra_fields, KNOWN_MCP_FIELDS))
    return lines


def _collapse_blank_lines(lines: list[str | None]) -> list[str]:
    """Turn None separators into single blank lines.

    ABOUTME: Leading, repeated and trailing separators are dropped
    ABOUTME: Blank lines inside preserved values are real content and stay
    """
    result: list[str | None] = []
    for line in lines:
        if line is None and (not result or result[-1] is None):
            continue
        result.append(line)
    while result and result[-1] is None:
        result.pop()
    return ["" if line is None else line for line in result]


def render_config(config: CodexConfig) -> str:
    """Render managed state and passthrough lines as config.toml text.

    ABOUTME: Section order is fixed: globals, unmanaged lines, providers, MCP servers
    ABOUTME: Unmanaged lines are re-filtered so managed content is never duplicated
    ABOUTME: Output is a fixed point: render(parse(render(c))) == render(c)

    Args:
        config: Document to render

    Returns:
        Config text ending in exactly one newline, or "" for an empty document
    """
    lines: list[str | None] = []

    if config.model or config.model_provider or config.providers:
        lines.extend(_global_lines(config))

    preserved = filter_unmanaged_lines(config.unmanaged_lines)
    if preserved:
        lines.extend(preserved)
        if config.providers or config.mcp_services:
            lines.append(None)

    for provider in config.providers:
        lines.append(None)
        lines.extend(render_provider(provider))

    if config.mcp_services:
        lines.append(None)
        lines.append(MCP_SENTINEL)
        for service in config.mcp_services:
            lines.extend(render_mcp_service(service))
            lines.append(None)

    output = _collapse_blank_lines(lines)
    if not output:
        return ""
    return "\n".join(output) + "\n"
