# Codex CLI config file access
import logging
from dataclasses import dataclass
from pathlib import Path

from codexcfg.config import get_config_path, load_settings, mark_env_key_migrated
from codexcfg.document import migrate_env_key, needs_migration, parse_config, render_config
from codexcfg.models import CodexConfig
from codexcfg.utils.atomic import write_text_atomic
from codexcfg.utils.backup import BackupSession

logger = logging.getLogger(__name__)


def get_codex_config_path() -> Path:
    return Path.home() / ".codex" / "config.toml"


@dataclass
class MigrationResult:
    """Outcome of the env_key migration.

    ABOUTME: warning is set when migration failed; the file is left untouched
    """
    migrated: bool = False
    skipped: bool = False
    backup_path: Path | None = None
    warning: str | None = None


class CodexConfigFile:
    """Reads and writes ~/.codex/config.toml through the document engine.

    ABOUTME: Every read and write first runs the gated env_key migration
    ABOUTME: Writes are backed up once per BackupSession and replaced atomically
    """

    def __init__(
        self,
        config_path: Path | None = None,
        settings_path: Path | None = None,
        backup_session: BackupSession | None = None,
    ) -> None:
        """Initialize with optional custom paths.

        ABOUTME: Defaults to ~/.codex/config.toml and ~/.codexcfg/config.json
        """
        self._config_path = config_path if config_path else get_codex_config_path()
        self._settings_path = settings_path if settings_path else get_config_path()
        self.backup_session = backup_session if backup_session else BackupSession()

    @property
    def name(self) -> str:
        """Human-readable platform name."""
        return "Codex CLI"

    @property
    def path(self) -> Path:
        """Configured config.toml path, whether or not it exists."""
        return self._config_path

    @property
    def config_path(self) -> Path | None:
        """Path to config.toml, or None if it doesn't exist."""
        return self._config_path if self._config_path.exists() else None

    def ensure_env_key_migration(self) -> MigrationResult:
        """Run the env_key -> temp_env_key migration at most once.

        ABOUTME: Skipped when the settings flag is already set
        ABOUTME: Failures are reported as a warning, never raised
        """
        try:
            if load_settings(self._settings_path).env_key_migrated:
                return MigrationResult(skipped=True)
            if not self._config_path.exists():
                return MigrationResult(skipped=True)

            content = self._config_path.read_text(encoding="utf-8")
            if not needs_migration(content):
                return MigrationResult(skipped=True)

            backup_path = self.backup_session.ensure_backup(self._config_path)
            write_text_atomic(self._config_path, migrate_env_key(content))
            mark_env_key_migrated(self._settings_path)
        except (OSError, ValueError) as e:
            logger.warning(f"env_key migration warning: {e}")
            return MigrationResult(warning=f"env_key migration warning: {e}")

        logger.info(f"Migrated env_key to temp_env_key in {self._config_path}")
        return MigrationResult(migrated=True, backup_path=backup_path)

    def read(self) -> CodexConfig | None:
        """Load config.toml as a CodexConfig.

        ABOUTME: Returns None if config doesn't exist
        ABOUTME: Never fails on malformed TOML, see parse_config()
        """
        self.ensure_env_key_migration()
        if not self._config_path.exists():
            return None
        return parse_config(self._config_path.read_text(encoding="utf-8"))

    def write(self, config: CodexConfig) -> Path | None:
        """Render config and replace config.toml with it.

        ABOUTME: Creates file and parent dirs if missing
        ABOUTME: Returns the backup path, None if there was nothing to back up
        """
        self.ensure_env_key_migration()
        backup_path = self.backup_session.ensure_backup(self._config_path)
        write_text_atomic(self._config_path, render_config(config))
        return backup_path
