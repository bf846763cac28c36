# ABOUTME: Utility modules for codexcfg
# ABOUTME: Exports backup, atomic write, TOML formatting and validation functions

from codexcfg.utils.atomic import write_text_atomic
from codexcfg.utils.backup import BackupSession, create_backup, get_backup_dir
from codexcfg.utils.toml_writer import format_value, normalize_toml_path
from codexcfg.utils.validation import (
    ValidationError,
    validate_command_exists,
    validate_provider,
    validate_service,
    validate_url,
)

__all__ = [
    "BackupSession",
    "create_backup",
    "get_backup_dir",
    "write_text_atomic",
    "format_value",
    "normalize_toml_path",
    "ValidationError",
    "validate_command_exists",
    "validate_provider",
    "validate_service",
    "validate_url",
]
