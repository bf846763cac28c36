# ABOUTME: Backup utilities for Codex configuration files.
# ABOUTME: Handles timestamped backups with automatic retention cleanup (keep last 5 per file).
import logging
import re
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

MAX_BACKUPS_PER_FILE = 5


def create_backup(source_path: Path, backup_dir: Path) -> Path:
    """Create a timestamped backup of a file.

    ABOUTME: Backup format: {stem}_{YYYYMMDD}_{HHMMSS}.{ext}
    ABOUTME: Uses shutil.copy2() to preserve file metadata
    ABOUTME: Creates backup_dir if it doesn't exist

    Args:
        source_path: Path to file to backup
        backup_dir: Directory where backup should be created

    Returns:
        Path to created backup file

    Raises:
        FileNotFoundError: If source_path doesn't exist
        OSError: If backup creation fails

    Examples:
        >>> backup_path = create_backup(Path("~/.codex/config.toml").expanduser(), get_backup_dir())
        >>> backup_path.name
        'config_20261018_143022.toml'
    """
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {source_path}")

    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    # e.g., config.toml -> config, auth.json -> auth
    stem = source_path.name.replace(".", "_").split("_")[0]
    backup_path = backup_dir / f"{stem}_{timestamp}{source_path.suffix}"

    shutil.copy2(source_path, backup_path)
    logger.debug(f"Backed up {source_path} to {backup_path}")

    cleanup_old_backups(backup_dir)

    return backup_path


def get_backup_dir() -> Path:
    """Get the default backup directory path.

    ABOUTME: Returns ~/.codexcfg/backups
    ABOUTME: Does not create the directory
    """
    return Path.home() / ".codexcfg" / "backups"


def cleanup_old_backups(backup_dir: Path, max_backups_per_file: int = MAX_BACKUPS_PER_FILE) -> list[Path]:
    """Remove old backup files, keeping only the most recent per source file.

    ABOUTME: Groups backups by stem prefix (before _timestamp)
    ABOUTME: Deletes backups beyond max_backups_per_file, newest kept
    ABOUTME: Logs warnings on errors but does not raise exceptions

    Args:
        backup_dir: Directory containing backup files
        max_backups_per_file: Maximum backups to keep per source file

    Returns:
        List of paths that were deleted
    """
    deleted_files: list[Path] = []

    if not backup_dir.exists():
        return deleted_files

    # e.g., config_20261018_143022.toml
    backup_pattern = re.compile(r"^(.+?)_(\d{8}_\d{6})\.(.+)$")

    backups_by_stem: dict[str, list[tuple[str, Path]]] = {}

    for file_path in backup_dir.iterdir():
        if not file_path.is_file():
            continue

        match = backup_pattern.match(file_path.name)
        if not match:
            continue

        backups_by_stem.setdefault(match.group(1), []).append((match.group(2), file_path))

    for backups in backups_by_stem.values():
        backups.sort(key=lambda x: x[0], reverse=True)

        for _timestamp, file_path in backups[max_backups_per_file:]:
            try:
                file_path.unlink()
                deleted_files.append(file_path)
                logger.debug(f"Deleted old backup: {file_path}")
            except OSError as e:
                logger.warning(f"Failed to delete old backup {file_path}: {e}")

    return deleted_files


@dataclass
class BackupSession:
    """Backs each file up at most once per operation.

    ABOUTME: Pass one session through every write of a batch operation
    ABOUTME: Later calls for the same file return the first backup path
    """
    backup_dir: Path = field(default_factory=get_backup_dir)
    backups: dict[Path, Path] = field(default_factory=dict)

    def ensure_backup(self, source_path: Path) -> Path | None:
        """Back up source_path unless already done; None if it doesn't exist."""
        key = source_path.resolve()
        if key in self.backups:
            return self.backups[key]
        if not source_path.exists():
            return None
        backup_path = create_backup(source_path, self.backup_dir)
        self.backups[key] = backup_path
        return backup_path
