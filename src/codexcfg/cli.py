# CLI interface for codexcfg
import argparse
import logging
import sys
from pathlib import Path
from typing import cast

from codexcfg import __version__, manager
from codexcfg.codex import CodexConfigFile
from codexcfg.manager import OperationReport
from codexcfg.models import DEFAULT_TEMP_ENV_KEY, DEFAULT_WIRE_API, McpService, Provider
from codexcfg.providers import default_env_key, sanitize_provider_id
from codexcfg.utils import validate_provider, validate_service, validate_url

# ABOUTME: Exit codes
# 0 = success, 1 = partial success, 2 = config error, 3 = fatal
EXIT_SUCCESS = 0
EXIT_PARTIAL = 1
EXIT_CONFIG_ERROR = 2
EXIT_FATAL = 3


def _config_file(args: argparse.Namespace) -> CodexConfigFile:
    return CodexConfigFile(config_path=args.config, settings_path=args.settings)


def _print_report(report: OperationReport) -> None:
    if report.backup_path:
        print(f"  Backup created: {report.backup_path}")
    for warning in report.warnings:
        print(f"  Warning: {warning}")


def _parse_pairs(raw: str | None) -> dict[str, str]:
    """Parse comma-separated KEY=VALUE pairs."""
    pairs: dict[str, str] = {}
    if not raw:
        return pairs
    for pair in raw.split(","):
        if "=" in pair:
            key, value = pair.split("=", 1)
            pairs[key.strip()] = value.strip()
    return pairs


def cmd_list(args: argparse.Namespace) -> int:
    """Execute list command.

    ABOUTME: Shows providers, the current default and MCP servers
    """
    print(f"codexcfg list v{__version__}")
    print()

    try:
        config = manager.load_existing(_config_file(args))
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR
    except OSError as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL

    if config.model:
        print(f"Model: {config.model}")
    if config.model_provider:
        state = " (commented out, official login)" if config.model_provider_commented else ""
        print(f"Default provider: {config.model_provider}{state}")
    print()

    print(f"Providers ({len(config.providers)}):")
    for provider in config.providers:
        marker = "*" if provider.id == config.model_provider else " "
        print(f"  {marker} {provider.id}")
        print(f"      name: {provider.name}")
        print(f"      base_url: {provider.base_url}")
        print(f"      wire_api: {provider.wire_api}")
        print(f"      temp_env_key: {provider.temp_env_key}")
        if provider.model:
            print(f"      model: {provider.model}")
    print()

    print(f"MCP servers ({len(config.mcp_services)}):")
    for service in config.mcp_services:
        command = " ".join([service.command or "", *(str(a) for a in service.args)]).strip()
        print(f"    {service.id}: {command}")

    if not config.is_managed:
        print()
        print("Config is not managed by codexcfg yet.")
    return EXIT_SUCCESS


def cmd_switch(args: argparse.Namespace) -> int:
    """Execute switch command.

    ABOUTME: Switches to a provider, or comments model_provider out with --official
    """
    print(f"codexcfg switch v{__version__}")
    print()

    config_file = _config_file(args)
    try:
        if args.official:
            report = manager.switch_to_official_login(config_file, auth_path=args.auth)
            print("Switched to official login.")
        else:
            if not args.provider:
                print("Error: Provide a provider id or --official.")
                return EXIT_CONFIG_ERROR
            report = manager.switch_to_provider(config_file, args.provider, auth_path=args.auth)
            print(f"Switched to provider '{args.provider}'.")
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR
    except OSError as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL

    _print_report(report)
    return EXIT_PARTIAL if report.warnings else EXIT_SUCCESS


def cmd_add_provider(args: argparse.Namespace) -> int:
    """Execute add-provider command.

    ABOUTME: The provider id is derived from the display name
    ABOUTME: An existing provider with the same id is replaced
    """
    print(f"codexcfg add-provider v{__version__}")
    print()

    provider_id = sanitize_provider_id(args.name)
    if not provider_id:
        print(f"Error: Cannot derive a provider id from '{args.name}'.")
        return EXIT_CONFIG_ERROR

    provider = Provider(
        id=provider_id,
        name=args.name.strip(),
        base_url=args.base_url,
        wire_api=args.wire_api,
        temp_env_key=args.env_key or default_env_key(provider_id),
        requires_openai_auth=not args.no_auth,
        model=args.model,
    )

    errors = [e for e in validate_provider(provider) if e.severity == "error"]
    for error in errors:
        print(f"  Provider '{provider_id}': {error.message}")
    if errors:
        return EXIT_CONFIG_ERROR

    try:
        report = manager.add_provider(
            _config_file(args),
            provider,
            api_key=args.api_key,
            make_default=args.default,
            auth_path=args.auth,
        )
    except (ValueError, OSError) as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL

    print(f"Provider '{provider_id}' saved.")
    _print_report(report)
    return EXIT_PARTIAL if report.warnings else EXIT_SUCCESS


def cmd_edit_provider(args: argparse.Namespace) -> int:
    """Execute edit-provider command.

    ABOUTME: Only the options given are changed, the id stays the same
    """
    print(f"codexcfg edit-provider v{__version__}")
    print()

    changes = {
        key: value
        for key, value in (
            ("name", args.name),
            ("base_url", args.base_url),
            ("wire_api", args.wire_api),
            ("temp_env_key", args.env_key),
            ("model", args.model),
            ("requires_openai_auth", args.requires_openai_auth),
        )
        if value is not None
    }
    if not changes:
        print("Error: Nothing to change, pass at least one option.")
        return EXIT_CONFIG_ERROR
    if "base_url" in changes:
        error = validate_url(args.base_url)
        if error:
            print(f"Error: {error.message}")
            return EXIT_CONFIG_ERROR

    try:
        report = manager.edit_provider(_config_file(args), args.id, **changes)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR
    except OSError as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL

    print(f"Provider '{args.id}' updated.")
    _print_report(report)
    return EXIT_PARTIAL if report.warnings else EXIT_SUCCESS


def cmd_copy_provider(args: argparse.Namespace) -> int:
    """Execute copy-provider command.

    ABOUTME: The copy's id is derived from the new display name
    """
    print(f"codexcfg copy-provider v{__version__}")
    print()

    changes = {
        key: value
        for key, value in (
            ("base_url", args.base_url),
            ("temp_env_key", args.env_key),
            ("model", args.model),
        )
        if value is not None
    }
    if "base_url" in changes:
        error = validate_url(args.base_url)
        if error:
            print(f"Error: {error.message}")
            return EXIT_CONFIG_ERROR

    try:
        report = manager.copy_provider(
            _config_file(args),
            args.source,
            args.name,
            api_key=args.api_key,
            auth_path=args.auth,
            **changes,
        )
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR
    except OSError as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL

    duplicate = cast(Provider, report.result)
    print(f"Provider '{args.source}' copied to '{duplicate.id}'.")
    _print_report(report)
    return EXIT_PARTIAL if report.warnings else EXIT_SUCCESS


def cmd_remove_provider(args: argparse.Namespace) -> int:
    """Execute remove-provider command."""
    print(f"codexcfg remove-provider v{__version__}")
    print()

    try:
        report = manager.delete_providers(_config_file(args), args.ids)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR
    except OSError as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL

    removed = report.result or []
    if not removed:
        print("  No matching providers found.")
        return EXIT_CONFIG_ERROR
    print(f"Removed provider(s): {', '.join(removed)}")
    _print_report(report)
    return EXIT_PARTIAL if report.warnings else EXIT_SUCCESS


def cmd_add_mcp(args: argparse.Namespace) -> int:
    """Execute add-mcp command.

    ABOUTME: Arguments and env vars use comma-separated CLI syntax
    """
    print(f"codexcfg add-mcp v{__version__}")
    print()

    service = McpService(
        id=args.id,
        command=args.command,
        args=[arg.strip() for arg in args.args.split(",")] if args.args else [],
        env=_parse_pairs(args.env) or None,
        startup_timeout_sec=args.startup_timeout,
    )
    for warning in validate_service(service):
        print(f"  Warning: {warning.message}")

    try:
        report = manager.add_mcp_service(_config_file(args), service)
    except (ValueError, OSError) as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL

    print(f"MCP server '{args.id}' saved.")
    _print_report(report)
    return EXIT_PARTIAL if report.warnings else EXIT_SUCCESS


def cmd_remove_mcp(args: argparse.Namespace) -> int:
    """Execute remove-mcp command."""
    print(f"codexcfg remove-mcp v{__version__}")
    print()

    try:
        report = manager.remove_mcp_service(_config_file(args), args.id)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR
    except OSError as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL

    if not report.result:
        print(f"  MCP server '{args.id}' not found in config.")
        return EXIT_CONFIG_ERROR
    print(f"MCP server '{args.id}' removed.")
    _print_report(report)
    return EXIT_PARTIAL if report.warnings else EXIT_SUCCESS


def cmd_migrate(args: argparse.Namespace) -> int:
    """Execute migrate command.

    ABOUTME: Runs the gated env_key -> temp_env_key migration explicitly
    """
    print(f"codexcfg migrate v{__version__}")
    print()

    result = _config_file(args).ensure_env_key_migration()
    if result.warning:
        print(f"  Warning: {result.warning}")
        return EXIT_PARTIAL
    if result.migrated:
        if result.backup_path:
            print(f"  Backup created: {result.backup_path}")
        print("env_key to temp_env_key migration completed.")
    else:
        print("Nothing to migrate.")
    return EXIT_SUCCESS


def cmd_validate(args: argparse.Namespace) -> int:
    """Execute validate command.

    ABOUTME: Checks providers and MCP servers without modifying files
    """
    print(f"codexcfg validate v{__version__}")
    print()

    try:
        config = manager.load_existing(_config_file(args))
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR
    except OSError as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL

    if not config.is_managed and config.unmanaged_lines:
        print("  ⚠ config.toml could not be parsed or has no managed entries")

    results = [
        *(e for p in config.providers for e in validate_provider(p)),
        *(e for s in config.mcp_services for e in validate_service(s)),
    ]
    if config.model_provider and config.get_provider(config.model_provider) is None:
        print(f"  ✗ model_provider '{config.model_provider}' has no [model_providers] entry")
        error_count = 1
    else:
        error_count = 0

    for result in results:
        symbol = "✗" if result.severity == "error" else "⚠"
        print(f"  {symbol} {result.name}: {result.message}")

    error_count += sum(1 for r in results if r.severity == "error")
    warning_count = sum(1 for r in results if r.severity == "warning")
    print()
    print(f"Validation complete: {error_count} error(s), {warning_count} warning(s)")
    return EXIT_CONFIG_ERROR if error_count else EXIT_SUCCESS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codexcfg",
        description="Manage model providers and MCP servers in Codex CLI's config.toml"
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"codexcfg v{__version__}"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to Codex config.toml (default: ~/.codex/config.toml)"
    )
    parser.add_argument(
        "--auth",
        type=Path,
        help="Path to Codex auth.json (default: ~/.codex/auth.json)"
    )
    parser.add_argument(
        "--settings",
        type=Path,
        help="Path to codexcfg settings (default: ~/.codexcfg/config.json)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("list", help="List providers and MCP servers")
    subparsers.add_parser("validate", help="Validate providers and MCP servers")
    subparsers.add_parser("migrate", help="Rename legacy env_key fields to temp_env_key")

    switch_parser = subparsers.add_parser("switch", help="Switch the default provider")
    switch_parser.add_argument("provider", nargs="?", help="Provider id to switch to")
    switch_parser.add_argument(
        "--official",
        action="store_true",
        help="Comment out model_provider and use the official login"
    )

    add_provider_parser = subparsers.add_parser("add-provider", help="Add or replace a model provider")
    add_provider_parser.add_argument("name", help="Display name (the id is derived from it)")
    add_provider_parser.add_argument("--base-url", required=True, help="Provider API base URL")
    add_provider_parser.add_argument(
        "--wire-api",
        choices=["responses", "chat"],
        default=DEFAULT_WIRE_API,
        help="Wire protocol (default: responses)"
    )
    add_provider_parser.add_argument(
        "--env-key",
        help=f"Env var holding the API key (default: <ID>_API_KEY, Codex default {DEFAULT_TEMP_ENV_KEY})"
    )
    add_provider_parser.add_argument("--api-key", help="API key to store in auth.json")
    add_provider_parser.add_argument("--model", help="Model to use with this provider")
    add_provider_parser.add_argument(
        "--no-auth",
        action="store_true",
        help="Set requires_openai_auth = false"
    )
    add_provider_parser.add_argument(
        "--default",
        action="store_true",
        help="Make this the default provider"
    )

    edit_provider_parser = subparsers.add_parser("edit-provider", help="Change fields of a model provider")
    edit_provider_parser.add_argument("id", help="Provider id to edit")
    edit_provider_parser.add_argument("--name", help="New display name")
    edit_provider_parser.add_argument("--base-url", help="Provider API base URL")
    edit_provider_parser.add_argument("--wire-api", choices=["responses", "chat"], help="Wire protocol")
    edit_provider_parser.add_argument("--env-key", help="Env var holding the API key")
    edit_provider_parser.add_argument("--model", help="Model to use with this provider")
    edit_provider_parser.add_argument(
        "--requires-openai-auth",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Set requires_openai_auth"
    )

    copy_provider_parser = subparsers.add_parser("copy-provider", help="Duplicate a model provider")
    copy_provider_parser.add_argument("source", help="Provider id to copy")
    copy_provider_parser.add_argument("name", help="Display name of the copy (the id is derived from it)")
    copy_provider_parser.add_argument("--base-url", help="Base URL for the copy")
    copy_provider_parser.add_argument("--env-key", help="Env var holding the copy's API key")
    copy_provider_parser.add_argument("--api-key", help="API key to store in auth.json")
    copy_provider_parser.add_argument("--model", help="Model to use with the copy")

    remove_provider_parser = subparsers.add_parser("remove-provider", help="Remove model providers")
    remove_provider_parser.add_argument("ids", nargs="+", help="Provider ids to remove")

    add_mcp_parser = subparsers.add_parser("add-mcp", help="Add or replace an MCP server")
    add_mcp_parser.add_argument("id", help="MCP server id")
    add_mcp_parser.add_argument("--command", required=True, help="Command to run")
    add_mcp_parser.add_argument("--args", help="Comma-separated arguments")
    add_mcp_parser.add_argument("--env", help="Comma-separated KEY=VALUE environment variables")
    add_mcp_parser.add_argument("--startup-timeout", type=int, help="startup_timeout_sec value")

    remove_mcp_parser = subparsers.add_parser("remove-mcp", help="Remove an MCP server")
    remove_mcp_parser.add_argument("id", help="MCP server id")

    return parser


COMMANDS = {
    "list": cmd_list,
    "switch": cmd_switch,
    "add-provider": cmd_add_provider,
    "edit-provider": cmd_edit_provider,
    "copy-provider": cmd_copy_provider,
    "remove-provider": cmd_remove_provider,
    "add-mcp": cmd_add_mcp,
    "remove-mcp": cmd_remove_mcp,
    "migrate": cmd_migrate,
    "validate": cmd_validate,
}


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    ABOUTME: Parses args and dispatches to appropriate command
    ABOUTME: Returns exit code for sys.exit()
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return EXIT_SUCCESS
    return command(args)


if __name__ == "__main__":
    sys.exit(main())
