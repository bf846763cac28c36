# ABOUTME: Tests for backup utilities.
# ABOUTME: Covers create_backup, cleanup_old_backups and BackupSession.
import re
from pathlib import Path

import pytest

from codexcfg.utils.backup import (
    BackupSession,
    cleanup_old_backups,
    create_backup,
    get_backup_dir,
)


def test_backup_dir_location():
    """Test that backups live under ~/.codexcfg/backups."""
    backup_dir = get_backup_dir()
    assert backup_dir.is_absolute()
    assert backup_dir.parent.name == ".codexcfg"
    assert backup_dir.name == "backups"


class TestCreateBackup:
    """Tests for create_backup function."""

    def test_copies_content(self, tmp_path):
        """Test that the backup is a byte copy of the source."""
        source = tmp_path / "config.toml"
        source.write_text('model = "gpt-5"\n')

        backup_path = create_backup(source, tmp_path / "backups")

        assert backup_path.read_text() == 'model = "gpt-5"\n'
        assert source.exists()

    def test_filename_format(self, tmp_path):
        """Test {stem}_{YYYYMMDD}_{HHMMSS}{suffix} naming."""
        source = tmp_path / "config.toml"
        source.write_text("")

        backup_path = create_backup(source, tmp_path / "backups")

        assert re.match(r"^config_\d{8}_\d{6}\.toml$", backup_path.name)

    def test_json_source(self, tmp_path):
        """Test backing up auth.json keeps the .json suffix."""
        source = tmp_path / "auth.json"
        source.write_text("{}")

        backup_path = create_backup(source, tmp_path / "backups")

        assert backup_path.name.startswith("auth_")
        assert backup_path.suffix == ".json"

    def test_creates_nested_backup_dir(self, tmp_path):
        """Test that the backup directory is created if missing."""
        source = tmp_path / "config.toml"
        source.write_text("")
        backup_dir = tmp_path / "a" / "b"

        create_backup(source, backup_dir)

        assert backup_dir.is_dir()

    def test_source_file_not_found(self, tmp_path):
        """Test that FileNotFoundError is raised for a missing source."""
        with pytest.raises(FileNotFoundError):
            create_backup(tmp_path / "missing.toml", tmp_path / "backups")

    def test_triggers_cleanup(self, tmp_path):
        """Test that create_backup trims old backups of the same file."""
        backup_dir = tmp_path / "backups"
        backup_dir.mkdir()
        for i in range(5):
            (backup_dir / f"config_20250101_00000{i}.toml").write_text("")

        source = tmp_path / "config.toml"
        source.write_text("")
        create_backup(source, backup_dir)

        assert len(list(backup_dir.glob("config_*.toml"))) == 5
        assert not (backup_dir / "config_20250101_000000.toml").exists()


class TestCleanupOldBackups:
    """Tests for cleanup_old_backups function."""

    def test_nonexistent_dir(self, tmp_path):
        assert cleanup_old_backups(tmp_path / "nonexistent") == []

    def test_keeps_newest_five(self, tmp_path):
        """Test that the oldest backups beyond five are deleted."""
        backup_dir = tmp_path / "backups"
        backup_dir.mkdir()
        for hour in range(10, 17):
            (backup_dir / f"config_20250101_{hour}0000.toml").write_text("")

        deleted = cleanup_old_backups(backup_dir)

        assert sorted(p.name for p in deleted) == [
            "config_20250101_100000.toml",
            "config_20250101_110000.toml",
        ]
        assert len(list(backup_dir.iterdir())) == 5

    def test_groups_by_file(self, tmp_path):
        """Test that config and auth backups are counted separately."""
        backup_dir = tmp_path / "backups"
        backup_dir.mkdir()
        for i in range(7):
            (backup_dir / f"config_20250101_00000{i}.toml").write_text("")
        for i in range(3):
            (backup_dir / f"auth_20250101_00000{i}.json").write_text("{}")

        deleted = cleanup_old_backups(backup_dir)

        assert len(deleted) == 2
        assert all(p.name.startswith("config_") for p in deleted)
        assert len(list(backup_dir.glob("auth_*.json"))) == 3

    def test_ignores_unrelated_entries(self, tmp_path):
        """Test that non-backup files and directories are left alone."""
        backup_dir = tmp_path / "backups"
        backup_dir.mkdir()
        (backup_dir / "notes.txt").write_text("keep")
        (backup_dir / "config_20250101_000000.toml").mkdir()

        assert cleanup_old_backups(backup_dir, max_backups_per_file=0) == []
        assert (backup_dir / "notes.txt").exists()

    def test_custom_limit(self, tmp_path):
        backup_dir = tmp_path / "backups"
        backup_dir.mkdir()
        for i in range(5):
            (backup_dir / f"config_20250101_00000{i}.toml").write_text("")

        deleted = cleanup_old_backups(backup_dir, max_backups_per_file=2)

        assert len(deleted) == 3


class TestBackupSession:
    """Tests for once-per-operation backups."""

    def test_backs_up_once(self, tmp_path):
        """Test that repeated calls reuse the first backup."""
        source = tmp_path / "config.toml"
        source.write_text("first\n")
        session = BackupSession(backup_dir=tmp_path / "backups")

        first = session.ensure_backup(source)
        source.write_text("second\n")
        second = session.ensure_backup(source)

        assert first == second
        assert isinstance(first, Path)
        assert first.read_text() == "first\n"
        assert len(list((tmp_path / "backups").iterdir())) == 1

    def test_missing_file(self, tmp_path):
        """Test that a missing file yields no backup."""
        session = BackupSession(backup_dir=tmp_path / "backups")
        assert session.ensure_backup(tmp_path / "config.toml") is None
        assert not (tmp_path / "backups").exists()

    def test_separate_files(self, tmp_path):
        """Test that each file gets its own backup."""
        config = tmp_path / "config.toml"
        auth = tmp_path / "auth.json"
        config.write_text("")
        auth.write_text("{}")
        session = BackupSession(backup_dir=tmp_path / "backups")

        assert session.ensure_backup(config) != session.ensure_backup(auth)
        assert len(session.backups) == 2
