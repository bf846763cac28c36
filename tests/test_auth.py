# ABOUTME: Tests for the auth.json credential store and JSON/atomic file helpers
import json
import os

import pytest

from codexcfg.auth import OPENAI_API_KEY, load_credentials, update_credentials
from codexcfg.utils.atomic import write_text_atomic
from codexcfg.utils.jsonfile import read_json_file


def test_load_missing_auth(tmp_path):
    assert load_credentials(tmp_path / "auth.json") == {}


def test_update_merges_and_keeps_other_keys(tmp_path):
    """Test that existing credentials survive an update."""
    path = tmp_path / "auth.json"
    path.write_text(json.dumps({"ACME_API_KEY": "sk-acme", "tokens": {"id": "x"}}))

    merged = update_credentials(path, {OPENAI_API_KEY: "sk-acme"})

    assert merged == {"ACME_API_KEY": "sk-acme", "tokens": {"id": "x"}, OPENAI_API_KEY: "sk-acme"}
    assert json.loads(path.read_text()) == merged


def test_update_writes_null(tmp_path):
    """Test that None clears the key as JSON null."""
    path = tmp_path / "auth.json"
    update_credentials(path, {OPENAI_API_KEY: None})
    assert '"OPENAI_API_KEY": null' in path.read_text()


def test_read_json_rejects_non_object(tmp_path):
    path = tmp_path / "auth.json"
    path.write_text("[1, 2]")
    with pytest.raises(ValueError, match="Expected a JSON object"):
        read_json_file(path)


class TestWriteTextAtomic:
    """Tests for atomic replacement."""

    def test_replaces_content(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("old\n")

        write_text_atomic(path, "new\n")

        assert path.read_text() == "new\n"

    def test_no_temp_files_left(self, tmp_path):
        path = tmp_path / "config.toml"
        write_text_atomic(path, "x\n")
        assert os.listdir(tmp_path) == ["config.toml"]

    def test_newlines_written_verbatim(self, tmp_path):
        path = tmp_path / "config.toml"
        write_text_atomic(path, "a\r\nb\n")
        assert path.read_bytes() == b"a\r\nb\n"

    def test_failed_write_keeps_original(self, tmp_path, monkeypatch):
        """Test that an error before the rename leaves the old file intact."""
        path = tmp_path / "config.toml"
        path.write_text("original\n")

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", broken_replace)
        with pytest.raises(OSError, match="disk full"):
            write_text_atomic(path, "new\n")

        assert path.read_text() == "original\n"
        assert os.listdir(tmp_path) == ["config.toml"]
