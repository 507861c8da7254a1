"""Tests for blob storage."""

import os
import stat
from unittest.mock import patch

import pytest

from shared.storage import LocalBlobStore, MemoryBlobStore


class TestMemoryBlobStore:
    def test_missing_key_returns_none(self):
        assert MemoryBlobStore().get("statistics") is None

    def test_set_then_get(self):
        store = MemoryBlobStore()
        store.set("statistics", "{}")
        assert store.get("statistics") == "{}"

    def test_initial_values_are_copied(self):
        initial = {"statistics": "{}"}
        store = MemoryBlobStore(initial)
        store.set("statistics", "[]")
        assert initial["statistics"] == "{}"


class TestLocalBlobStore:
    def test_missing_key_returns_none(self, tmp_path):
        store = LocalBlobStore(tmp_path / "data")
        assert store.get("statistics") is None

    def test_does_not_create_directory_on_read(self, tmp_path):
        data_dir = tmp_path / "data"
        LocalBlobStore(data_dir).get("statistics")
        assert not data_dir.exists()

    def test_creates_directory_on_first_write(self, tmp_path):
        data_dir = tmp_path / "data"
        store = LocalBlobStore(data_dir)

        store.set("statistics", '{"games":[]}')

        assert data_dir.is_dir()
        assert (data_dir / "statistics.json").read_text(encoding="utf-8") == '{"games":[]}'

    def test_round_trip(self, tmp_path):
        store = LocalBlobStore(tmp_path)
        store.set("statistics", '{"games":[]}')
        assert LocalBlobStore(tmp_path).get("statistics") == '{"games":[]}'

    def test_overwrites_existing_value(self, tmp_path):
        store = LocalBlobStore(tmp_path)
        store.set("statistics", "original")
        store.set("statistics", "updated")
        assert store.get("statistics") == "updated"

    def test_utf8_content(self, tmp_path):
        store = LocalBlobStore(tmp_path)
        content = '{"winnerName":"Кирилл"}'
        store.set("statistics", content)
        assert store.get("statistics") == content

    def test_file_permissions_owner_only(self, tmp_path):
        data_dir = tmp_path / "data"
        store = LocalBlobStore(data_dir)
        store.set("statistics", "{}")

        file_mode = stat.S_IMODE(os.stat(data_dir / "statistics.json").st_mode)
        dir_mode = stat.S_IMODE(os.stat(data_dir).st_mode)
        assert file_mode == 0o600
        assert dir_mode == 0o700

    def test_no_temp_files_left_behind(self, tmp_path):
        store = LocalBlobStore(tmp_path)
        store.set("statistics", "{}")
        assert [p.name for p in tmp_path.iterdir()] == ["statistics.json"]

    @pytest.mark.parametrize("key", ["../escape", "a/b", "", ".hidden", "with space"])
    def test_rejects_invalid_keys(self, tmp_path, key):
        store = LocalBlobStore(tmp_path)
        with pytest.raises(ValueError, match="Invalid storage key"):
            store.set(key, "x")
        with pytest.raises(ValueError, match="Invalid storage key"):
            store.get(key)


class TestLocalBlobStoreErrorHandling:
    def test_write_failure_cleans_up_temp_file(self, tmp_path):
        store = LocalBlobStore(tmp_path)

        with patch("shared.storage.os.fsync", side_effect=OSError("disk full")), pytest.raises(OSError, match="disk full"):
            store.set("statistics", "{}")

        assert list(tmp_path.iterdir()) == []

    def test_failed_write_keeps_previous_value(self, tmp_path):
        store = LocalBlobStore(tmp_path)
        store.set("statistics", "original")

        with patch("shared.storage.os.fsync", side_effect=OSError("disk full")), pytest.raises(OSError):
            store.set("statistics", "updated")

        assert store.get("statistics") == "original"
