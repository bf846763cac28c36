# ABOUTME: Selective config document engine for Codex config.toml
# ABOUTME: Text in, text out: parse, render and the env_key migration
from codexcfg.document.extract import ConfigShapeError
from codexcfg.document.migration import migrate_env_key, needs_migration
from codexcfg.document.parse import parse_config
from codexcfg.document.render import render_config

__all__ = [
    "ConfigShapeError",
    "migrate_env_key",
    "needs_migration",
    "parse_config",
    "render_config",
]
