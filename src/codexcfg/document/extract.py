# Entity extraction from a parsed Codex config tree
import logging
from typing import Any

from codexcfg.document.markers import MCP_SERVERS_TABLE, MODEL_KEY, PROVIDERS_TABLE
from codexcfg.models import (
    DEFAULT_TEMP_ENV_KEY,
    DEFAULT_WIRE_API,
    CodexConfig,
    McpService,
    Provider,
)
from codexcfg.utils.toml_writer import format_value

logger = logging.getLogger(__name__)

KNOWN_PROVIDER_FIELDS = frozenset(
    {"name", "base_url", "wire_api", "temp_env_key", "requires_openai_auth", "model"}
)
KNOWN_MCP_FIELDS = frozenset({"command", "args", "env", "startup_timeout_sec"})

FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


class ConfigShapeError(ValueError):
    """A managed table has a shape codexcfg cannot model."""


def _table(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ConfigShapeError(f"'{key}' must be a table, got {type(value).__name__}")
    return value


def _coerce_str(owner: str, key: str, value: Any) -> str | None:
    """Read a string field, turning other scalars into their TOML text.

    ABOUTME: Arrays and tables can't become a string, those are dropped with a warning
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, list | dict):
        logger.warning(f"{owner}: ignoring '{key}', expected a string")
        return None
    coerced = format_value(value, normalize_paths=False)
    logger.warning(f"{owner}: '{key}' is not a string, using {coerced!r}")
    return coerced


def _coerce_bool(owner: str, key: str, value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    if isinstance(value, str):
        coerced = value.strip().lower() not in FALSE_STRINGS
    elif isinstance(value, int | float):
        coerced = bool(value)
    else:
        coerced = default
    logger.warning(f"{owner}: '{key}' is not a boolean, using {coerced}")
    return coerced


def _coerce_number(owner: str, key: str, value: Any) -> int | float | None:
    if value is None:
        return None
    if isinstance(value, int | float) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        for convert in (int, float):
            try:
                coerced = convert(value.strip())
            except ValueError:
                continue
            logger.warning(f"{owner}: '{key}' is a string, using {coerced}")
            return coerced
    logger.warning(f"{owner}: ignoring '{key}', expected a number")
    return None


def _extra_fields(data: dict[str, Any], known: frozenset[str]) -> dict[str, Any] | None:
    extra = {key: value for key, value in data.items() if key not in known}
    return extra or None


def dict_to_provider(provider_id: str, data: Any) -> Provider:
    """Convert a [model_providers.<id>] table to a Provider.

    ABOUTME: wire_api defaults to "responses", requires_openai_auth to True
    ABOUTME: Known keys with the wrong type are coerced, never rejected
    ABOUTME: Unknown keys go to extra_fields untouched
    """
    owner = f"Provider '{provider_id}'"
    if not isinstance(data, dict):
        raise ConfigShapeError(f"{owner} must be a table")

    def text(key: str) -> str | None:
        return _coerce_str(owner, key, data.get(key))

    return Provider(
        id=provider_id,
        name=text("name") or provider_id,
        base_url=text("base_url") or "",
        wire_api=text("wire_api") or DEFAULT_WIRE_API,
        temp_env_key=text("temp_env_key") or DEFAULT_TEMP_ENV_KEY,
        requires_openai_auth=_coerce_bool(
            owner, "requires_openai_auth", data.get("requires_openai_auth"), True
        ),
        model=text("model") or None,
        extra_fields=_extra_fields(data, KNOWN_PROVIDER_FIELDS),
    )


def dict_to_mcp_service(service_id: str, data: Any) -> McpService:
    """Convert an [mcp_servers.<id>] table to an McpService.

    ABOUTME: Keys outside KNOWN_MCP_FIELDS keep their native shape in extra_fields
    ABOUTME: A string args becomes a one-item list, a list command is split into
    ABOUTME: command plus leading args
    ABOUTME: Empty env and empty extras collapse to None
    """
    owner = f"MCP server '{service_id}'"
    if not isinstance(data, dict):
        raise ConfigShapeError(f"{owner} must be a table")

    args = data.get("args", [])
    if isinstance(args, str):
        logger.warning(f"{owner}: 'args' is a string, treating it as one argument")
        args = [args]
    elif not isinstance(args, list):
        logger.warning(f"{owner}: ignoring 'args', expected an array")
        args = []

    command = data.get("command")
    if isinstance(command, list):
        logger.warning(f"{owner}: 'command' is an array, splitting off its arguments")
        args = command[1:] + args
        command = command[0] if command else None
    command = _coerce_str(owner, "command", command)

    env = data.get("env")
    if env is not None and not isinstance(env, dict):
        logger.warning(f"{owner}: ignoring 'env', expected a table")
        env = None

    return McpService(
        id=service_id,
        command=command,
        args=list(args),
        env=dict(env) if env else None,
        startup_timeout_sec=_coerce_number(
            owner, "startup_timeout_sec", data.get("startup_timeout_sec")
        ),
        extra_fields=_extra_fields(data, KNOWN_MCP_FIELDS),
    )


def extract_entities(data: dict[str, Any]) -> CodexConfig:
    """Pull managed entities out of a tomli-parsed tree.

    ABOUTME: Fills providers, mcp_services and model only
    ABOUTME: model_provider is resolved separately by the directive scanner
    ABOUTME: Table order from the source is preserved

    Args:
        data: Result of tomli.loads() on the config text

    Returns:
        Partially populated CodexConfig

    Raises:
        ConfigShapeError: If a managed table or one of its entries is not a table
    """
    providers = [
        dict_to_provider(provider_id, provider_data)
        for provider_id, provider_data in _table(data, PROVIDERS_TABLE).items()
    ]
    services = [
        dict_to_mcp_service(service_id, service_data)
        for service_id, service_data in _table(data, MCP_SERVERS_TABLE).items()
    ]

    model = data.get(MODEL_KEY)
    if not isinstance(model, str) or not model:
        model = None

    return CodexConfig(model=model, providers=providers, mcp_services=services)
