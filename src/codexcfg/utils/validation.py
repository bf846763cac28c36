# ABOUTME: Validation utilities for Codex providers and MCP servers
# ABOUTME: Checks known entity shapes only, never the rest of config.toml
import shutil
from dataclasses import dataclass
from typing import get_args
from urllib.parse import urlparse

from codexcfg.models import McpService, Provider, WireApi

# Values Codex accepts for wire_api
WIRE_APIS = frozenset(get_args(WireApi))


@dataclass(frozen=True)
class ValidationError:
    """Represents a validation error or warning.

    ABOUTME: Uses frozen dataclass for immutability
    ABOUTME: Severity level distinguishes between blocking errors and warnings
    """
    name: str
    message: str
    severity: str  # 'error' or 'warning'


def validate_command_exists(command: str) -> ValidationError | None:
    """Validate that a command exists on the system.

    ABOUTME: Uses shutil.which() for cross-platform command lookup
    ABOUTME: Returns None if command found, ValidationError otherwise
    """
    if shutil.which(command) is None:
        return ValidationError(
            name="",
            message=f"Command not found: {command}",
            severity="error"
        )
    return None


def validate_url(url: str) -> ValidationError | None:
    """Validate that a URL is properly formatted.

    ABOUTME: Requires HTTP or HTTPS scheme and a host
    ABOUTME: Returns None if URL valid, ValidationError otherwise
    """
    try:
        parsed = urlparse(url)
    except ValueError as e:
        return ValidationError(
            name="",
            message=f"Invalid URL format '{url}': {e}",
            severity="error"
        )
    if parsed.scheme not in ("http", "https"):
        return ValidationError(
            name="",
            message=f"URL must use HTTP or HTTPS scheme: {url}",
            severity="error"
        )
    if not parsed.netloc:
        return ValidationError(
            name="",
            message=f"URL missing host/domain: {url}",
            severity="error"
        )
    return None


def validate_provider(provider: Provider) -> list[ValidationError]:
    """Validate a model provider.

    ABOUTME: base_url must be an http(s) URL
    ABOUTME: Unknown wire_api and empty temp_env_key are warnings

    Args:
        provider: Provider to validate

    Returns:
        List of ValidationError instances (empty if valid)
    """
    errors: list[ValidationError] = []

    url_error = validate_url(provider.base_url)
    if url_error:
        errors.append(ValidationError(
            name=provider.id,
            message=url_error.message,
            severity=url_error.severity
        ))

    if provider.wire_api not in WIRE_APIS:
        errors.append(ValidationError(
            name=provider.id,
            message=f"Unknown wire_api '{provider.wire_api}' (expected one of: {', '.join(sorted(WIRE_APIS))})",
            severity="warning"
        ))

    if provider.requires_openai_auth and not provider.temp_env_key:
        errors.append(ValidationError(
            name=provider.id,
            message="temp_env_key is empty but requires_openai_auth is true",
            severity="warning"
        ))

    return errors


def validate_service(service: McpService) -> list[ValidationError]:
    """Validate an MCP server definition.

    ABOUTME: A missing command binary is a warning, it may be installed later
    ABOUTME: A server with neither command nor url is an error
    """
    errors: list[ValidationError] = []

    if service.command:
        cmd_error = validate_command_exists(service.command)
        if cmd_error:
            errors.append(ValidationError(
                name=service.id,
                message=cmd_error.message,
                severity="warning"
            ))
    elif not (service.extra_fields or {}).get("url"):
        errors.append(ValidationError(
            name=service.id,
            message="MCP server has neither 'command' nor 'url'",
            severity="error"
        ))

    return errors
