# codexcfg - Selective Codex CLI config.toml manager
# ABOUTME: Version information
__version__ = "0.1.0"

# ABOUTME: Export core data models
from codexcfg.models import CodexConfig, McpService, Provider

# ABOUTME: Export the text-in/text-out document engine
from codexcfg.document import migrate_env_key, needs_migration, parse_config, render_config

# ABOUTME: Export file access and settings
from codexcfg.codex import CodexConfigFile, MigrationResult
from codexcfg.config import Settings, get_config_path, load_settings

__all__ = [
    "__version__",
    "CodexConfig",
    "McpService",
    "Provider",
    "parse_config",
    "render_config",
    "needs_migration",
    "migrate_env_key",
    "CodexConfigFile",
    "MigrationResult",
    "Settings",
    "get_config_path",
    "load_settings",
]
