"""Tests for the local key-value storage."""

import json
import os
import stat
from unittest.mock import patch

import pytest

from shared.storage import LocalKeyValueStorage


class TestLocalKeyValueStorage:
    def test_missing_file_reads_as_empty(self, tmp_path):
        storage = LocalKeyValueStorage(tmp_path / "store.json")

        assert storage.get_item("courtside_auth_user") is None
        assert not storage.file_path.exists()

    def test_set_then_get(self, tmp_path):
        storage = LocalKeyValueStorage(tmp_path / "store.json")

        storage.set_item("courtside_auth_user", '{"id":"guest_1"}')

        assert storage.get_item("courtside_auth_user") == '{"id":"guest_1"}'

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "data" / "nested" / "store.json"
        LocalKeyValueStorage(path).set_item("k", "v")

        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}

    def test_overwrite_keeps_other_keys(self, tmp_path):
        storage = LocalKeyValueStorage(str(tmp_path / "store.json"))
        storage.set_item("a", "1")
        storage.set_item("b", "2")
        storage.set_item("a", "3")

        assert storage.get_item("a") == "3"
        assert storage.get_item("b") == "2"

    def test_instances_on_same_path_agree(self, tmp_path):
        path = tmp_path / "store.json"
        LocalKeyValueStorage(path).set_item("k", "코트")

        assert LocalKeyValueStorage(path).get_item("k") == "코트"

    def test_remove_item(self, tmp_path):
        storage = LocalKeyValueStorage(tmp_path / "store.json")
        storage.set_item("a", "1")
        storage.set_item("b", "2")

        storage.remove_item("a")

        assert storage.get_item("a") is None
        assert storage.get_item("b") == "2"

    def test_remove_missing_key_does_not_create_file(self, tmp_path):
        storage = LocalKeyValueStorage(tmp_path / "store.json")

        storage.remove_item("absent")

        assert not storage.file_path.exists()


class TestLocalKeyValueStorageErrors:
    def test_corrupt_file_raises_oserror(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(OSError, match="Failed to read storage file"):
            LocalKeyValueStorage(path).get_item("k")

    def test_non_string_values_raise_oserror(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text('{"k": 1}', encoding="utf-8")

        with pytest.raises(OSError, match="JSON object of strings"):
            LocalKeyValueStorage(path).get_item("k")

    def test_corrupt_file_is_not_overwritten(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(OSError):
            LocalKeyValueStorage(path).set_item("k", "v")

        assert path.read_text(encoding="utf-8") == "[1, 2]"

    def test_cleans_up_temp_file_on_fsync_failure(self, tmp_path):
        storage = LocalKeyValueStorage(tmp_path / "store.json")

        with (
            patch("os.fsync", side_effect=OSError("fsync failure")),
            pytest.raises(OSError, match="fsync failure"),
        ):
            storage.set_item("k", "v")

        assert not storage.file_path.exists()
        assert list(tmp_path.glob(".storage_*.tmp")) == []

    def test_closes_fd_when_fdopen_fails(self, tmp_path):
        storage = LocalKeyValueStorage(tmp_path / "store.json")

        with (
            patch("os.fdopen", side_effect=OSError("fdopen failure")) as mock_fdopen,
            patch("os.close", wraps=os.close) as mock_close,
            pytest.raises(OSError, match="fdopen failure"),
        ):
            storage.set_item("k", "v")

        mock_close.assert_called_once_with(mock_fdopen.call_args[0][0])
        assert list(tmp_path.glob(".storage_*.tmp")) == []


class TestLocalKeyValueStoragePermissions:
    def test_file_is_owner_only(self, tmp_path):
        storage = LocalKeyValueStorage(tmp_path / "store.json")

        storage.set_item("courtside_auth_user", "{}")
        storage.set_item("courtside_auth_user", "{}")

        mode = storage.file_path.stat().st_mode
        assert stat.S_IMODE(mode) == 0o600
        assert not mode & stat.S_IROTH
