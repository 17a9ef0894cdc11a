"""Tests for JsonFileConfigStore."""
import json
import os

import pytest

from skillradar.common.config_store import JsonFileConfigStore


class TestJsonFileConfigStore:
    """Section store semantics and on-disk format."""

    @pytest.fixture
    def temp_config(self, tmp_path):
        """Create a temporary config file path."""
        return str(tmp_path / "skillradar.json")

    def test_put_and_get(self, temp_config):
        """Test basic put and get operations."""
        store = JsonFileConfigStore(temp_config)
        store.put("settings", log_level="INFO", window_width=800)
        assert store.get("settings") == {"log_level": "INFO", "window_width": 800}

    def test_get_nonexistent(self, temp_config):
        store = JsonFileConfigStore(temp_config)
        assert store.get("nonexistent") is None

    def test_get_returns_a_copy(self, temp_config):
        store = JsonFileConfigStore(temp_config)
        store.put("settings", log_level="INFO")
        store.get("settings")["log_level"] = "DEBUG"
        assert store.get("settings") == {"log_level": "INFO"}

    def test_exists_and_delete(self, temp_config):
        store = JsonFileConfigStore(temp_config)
        store.put("skill-data", tasks=[])
        assert store.exists("skill-data") is True
        assert store.delete("skill-data") is True
        assert store.exists("skill-data") is False
        assert store.delete("skill-data") is False  # Already deleted

    def test_persistence(self, temp_config):
        """Test data persists across instances."""
        JsonFileConfigStore(temp_config).put("settings", subject_name="Ada")
        assert JsonFileConfigStore(temp_config).get("settings") == {"subject_name": "Ada"}

    def test_non_ascii_written_verbatim(self, temp_config):
        JsonFileConfigStore(temp_config).put("skill-data", name="Lesefærdighed")
        with open(temp_config, encoding="utf-8") as f:
            assert "Lesefærdighed" in f.read()

    def test_mapping_protocol(self, temp_config):
        """dict(store), len() and `in` behave like a mapping of sections."""
        store = JsonFileConfigStore(temp_config)
        store.put("settings", log_level="INFO")
        store.put("skill-data", nextTaskId=1)
        assert dict(store) == {"settings": {"log_level": "INFO"}, "skill-data": {"nextTaskId": 1}}
        assert len(store) == 2
        assert "settings" in store
        assert 42 not in store

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "data.json"
        JsonFileConfigStore(str(path)).put("settings", log_level="INFO")
        assert path.exists()


class TestAtomicWrite:
    def test_no_temp_files_left(self, tmp_path):
        store = JsonFileConfigStore(str(tmp_path / "data.json"))
        for i in range(5):
            store.put("settings", counter=i)
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]

    def test_failed_write_keeps_previous_file(self, tmp_path, monkeypatch):
        path = tmp_path / "data.json"
        store = JsonFileConfigStore(str(path))
        store.put("settings", log_level="INFO")

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", fail_replace)
        with pytest.raises(OSError):
            store.put("settings", log_level="DEBUG")
        monkeypatch.undo()

        assert json.loads(path.read_text(encoding="utf-8")) == {"settings": {"log_level": "INFO"}}
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]


class TestCorruptFiles:
    def test_invalid_json_is_moved_aside(self, tmp_path, caplog):
        path = tmp_path / "data.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonFileConfigStore(str(path))
        assert len(store) == 0
        assert not path.exists()
        preserved = [p.name for p in tmp_path.iterdir() if ".corrupt." in p.name]
        assert len(preserved) == 1
        assert "Corrupt data file" in caplog.text

    def test_top_level_list_is_ignored(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        store = JsonFileConfigStore(str(path))
        assert dict(store) == {}

    def test_non_dict_sections_are_dropped(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"settings": {"log_level": "INFO"}, "skill-data": "oops"}), encoding="utf-8")
        store = JsonFileConfigStore(str(path))
        assert dict(store) == {"settings": {"log_level": "INFO"}}

    def test_store_usable_after_corruption(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("garbage", encoding="utf-8")
        store = JsonFileConfigStore(str(path))
        store.put("settings", log_level="INFO")
        assert JsonFileConfigStore(str(path)).get("settings") == {"log_level": "INFO"}
