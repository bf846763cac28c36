# Read-modify-write orchestration for codexcfg commands
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar, cast

from codexcfg import mcp, providers
from codexcfg.auth import OPENAI_API_KEY, get_auth_path, load_credentials, update_credentials
from codexcfg.codex import CodexConfigFile
from codexcfg.models import CodexConfig, McpService, Provider

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class OperationReport:
    """Report from one config-changing operation.

    ABOUTME: backup_path is the single backup taken for this operation
    ABOUTME: warnings are non-fatal (e.g. a failed env_key migration)
    """
    result: object = None
    backup_path: Path | None = None
    warnings: list[str] = field(default_factory=list)


def load_existing(config_file: CodexConfigFile) -> CodexConfig:
    """Read config.toml, failing if it doesn't exist yet."""
    config = config_file.read()
    if config is None:
        raise FileNotFoundError(f"Codex config not found: {config_file.path}")
    return config


def apply(
    config_file: CodexConfigFile,
    mutate: Callable[[CodexConfig], T],
    create: bool = False,
) -> OperationReport:
    """Read, mutate and write back config.toml in one operation.

    ABOUTME: The document is rebuilt from disk every time, never cached
    ABOUTME: create=True starts from an empty document when the file is missing
    ABOUTME: mutate() returning False or [] means "no change", nothing is written

    Args:
        config_file: Config file to operate on
        mutate: Function changing the document in place
        create: Allow creating config.toml

    Returns:
        OperationReport with mutate()'s return value as result
    """
    report = OperationReport()
    migration = config_file.ensure_env_key_migration()
    if migration.warning:
        report.warnings.append(migration.warning)

    config = config_file.read()
    if config is None:
        if not create:
            raise FileNotFoundError(f"Codex config not found: {config_file.path}")
        config = CodexConfig()

    report.result = mutate(config)
    if report.result is False or report.result == []:
        return report
    report.backup_path = config_file.write(config)
    return report


def switch_to_provider(
    config_file: CodexConfigFile, provider_id: str, auth_path: Path | None = None
) -> OperationReport:
    """Activate a provider and point OPENAI_API_KEY at its stored key.

    ABOUTME: The key is looked up in auth.json under the provider's temp_env_key
    """
    auth_path = auth_path if auth_path else get_auth_path()
    report = apply(config_file, lambda config: providers.switch_provider(config, provider_id))

    provider = cast(Provider, report.result)
    credentials = load_credentials(auth_path)
    update_credentials(auth_path, {OPENAI_API_KEY: credentials.get(provider.temp_env_key)})
    logger.info(f"Switched Codex to provider '{provider_id}'")
    return report


def switch_to_official_login(
    config_file: CodexConfigFile, auth_path: Path | None = None
) -> OperationReport:
    """Comment out model_provider and clear OPENAI_API_KEY."""
    auth_path = auth_path if auth_path else get_auth_path()
    report = apply(config_file, providers.switch_to_official_login)
    update_credentials(auth_path, {OPENAI_API_KEY: None})
    logger.info("Switched Codex to official login")
    return report


def add_provider(
    config_file: CodexConfigFile,
    provider: Provider,
    api_key: str | None = None,
    make_default: bool = False,
    auth_path: Path | None = None,
) -> OperationReport:
    """Add (or replace) a provider and store its API key.

    ABOUTME: Creates config.toml if it doesn't exist yet
    ABOUTME: The first provider of a config becomes the default
    """
    auth_path = auth_path if auth_path else get_auth_path()
    became_default = make_default

    def mutate(config: CodexConfig) -> Provider:
        nonlocal became_default
        became_default = make_default or not config.providers
        return providers.add_provider(config, provider, make_default=became_default)

    report = apply(config_file, mutate, create=True)

    if api_key:
        entries: dict[str, str | None] = {provider.temp_env_key: api_key}
        if became_default:
            entries[OPENAI_API_KEY] = api_key
        update_credentials(auth_path, entries)
    return report


def edit_provider(
    config_file: CodexConfigFile, provider_id: str, **changes: object
) -> OperationReport:
    """Change fields of an existing provider, keeping its id and position."""
    return apply(
        config_file, lambda config: providers.edit_provider(config, provider_id, **changes)
    )


def copy_provider(
    config_file: CodexConfigFile,
    source_id: str,
    new_name: str,
    api_key: str | None = None,
    auth_path: Path | None = None,
    **changes: object,
) -> OperationReport:
    """Duplicate a provider under a new name and store the copy's API key.

    ABOUTME: With an api_key and no explicit temp_env_key the copy gets its own
    ABOUTME: <ID>_API_KEY slot and the source's auth.json entry is left as is
    """
    auth_path = auth_path if auth_path else get_auth_path()
    if api_key and "temp_env_key" not in changes:
        changes["temp_env_key"] = providers.default_env_key(
            providers.sanitize_provider_id(new_name)
        )

    report = apply(
        config_file,
        lambda config: providers.copy_provider(config, source_id, new_name, **changes),
    )

    duplicate = cast(Provider, report.result)
    if api_key:
        update_credentials(auth_path, {duplicate.temp_env_key: api_key})
    logger.info(f"Copied provider '{source_id}' to '{duplicate.id}'")
    return report


def delete_providers(config_file: CodexConfigFile, provider_ids: list[str]) -> OperationReport:
    return apply(config_file, lambda config: providers.delete_providers(config, provider_ids))


def add_mcp_service(config_file: CodexConfigFile, service: McpService) -> OperationReport:
    return apply(config_file, lambda config: mcp.add_mcp_service(config, service), create=True)


def remove_mcp_service(config_file: CodexConfigFile, service_id: str) -> OperationReport:
    return apply(config_file, lambda config: mcp.remove_mcp_service(config, service_id))
