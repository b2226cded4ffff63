"""Unit tests for the atomic file store."""

import os
from unittest.mock import patch

import pytest

from locbox.errors import VaultIOError
from locbox.storage import read_bytes, set_permissions, write_atomic


class TestReadBytes:
    """Tests for read_bytes."""

    def test_missing_file(self, temp_vault_dir):
        assert read_bytes(temp_vault_dir / "nope.json") is None

    def test_existing_file(self, temp_vault_dir):
        path = temp_vault_dir / "db.json"
        path.write_bytes(b"content")
        assert read_bytes(path) == b"content"

    def test_directory_raises(self, temp_vault_dir):
        with pytest.raises(VaultIOError):
            read_bytes(temp_vault_dir)


class TestWriteAtomic:
    """Tests for write_atomic."""

    def test_creates_file(self, temp_vault_dir):
        path = temp_vault_dir / "db.json"
        write_atomic(path, b"new content")
        assert path.read_bytes() == b"new content"

    def test_replaces_file(self, temp_vault_dir):
        path = temp_vault_dir / "db.json"
        path.write_bytes(b"old")
        write_atomic(path, b"new")
        assert path.read_bytes() == b"new"

    def test_owner_only_permissions(self, temp_vault_dir):
        path = temp_vault_dir / "db.json"
        write_atomic(path, b"data")
        assert oct(path.stat().st_mode)[-3:] == "600"

    def test_no_temp_files_left(self, temp_vault_dir):
        path = temp_vault_dir / "db.json"
        write_atomic(path, b"one")
        write_atomic(path, b"two")
        assert sorted(p.name for p in temp_vault_dir.iterdir()) == ["db.json"]

    def test_interrupted_write_keeps_previous_content(self, temp_vault_dir):
        """A failure before the rename leaves the old file byte-for-byte."""
        path = temp_vault_dir / "db.json"
        path.write_bytes(b"previous content")

        with patch("locbox.storage.os.fsync", side_effect=OSError("disk gone")):
            with pytest.raises(VaultIOError, match="disk gone"):
                write_atomic(path, b"replacement")

        assert path.read_bytes() == b"previous content"
        assert sorted(p.name for p in temp_vault_dir.iterdir()) == ["db.json"]

    def test_failed_rename_keeps_previous_content(self, temp_vault_dir):
        path = temp_vault_dir / "db.json"
        path.write_bytes(b"previous content")

        with patch("locbox.storage.os.replace", side_effect=OSError("rename failed")):
            with pytest.raises(VaultIOError):
                write_atomic(path, b"replacement")

        assert path.read_bytes() == b"previous content"
        assert sorted(p.name for p in temp_vault_dir.iterdir()) == ["db.json"]

    def test_missing_directory(self, temp_vault_dir):
        with pytest.raises(VaultIOError):
            write_atomic(temp_vault_dir / "missing" / "db.json", b"data")

    def test_relative_path(self, temp_vault_dir, monkeypatch):
        monkeypatch.chdir(temp_vault_dir)
        write_atomic("db.json", b"data")
        assert (temp_vault_dir / "db.json").read_bytes() == b"data"


class TestSetPermissions:
    """Tests for set_permissions."""

    @patch("locbox.storage.os.chmod")
    def test_set_permissions_default(self, mock_chmod):
        set_permissions("/path/to/file")
        mock_chmod.assert_called_once_with("/path/to/file", 0o600)

    @patch("locbox.storage.os.chmod")
    def test_set_permissions_custom(self, mock_chmod):
        set_permissions("/path/to/file", 0o644)
        mock_chmod.assert_called_once_with("/path/to/file", 0o644)
