"""Tests for config module."""

import json
import os

import pytest
from pathlib import Path

from folder_monitor.config import MonitorConfig, load_folder_candidates
from folder_monitor.exceptions import ConfigNotFoundError, InvalidConfigError


class TestMonitorConfig:
    """Tests for MonitorConfig class."""

    def test_default_values(self):
        config = MonitorConfig()
        assert config.config_path == Path("folders.json")
        assert config.consumer_count == max(1, os.cpu_count() or 1)
        assert config.join_timeout == 5.0
        assert config.quit_key == "q"
        assert config.recursive is True
        assert config.ignore_patterns == []
        assert config.log_level == "INFO"

    def test_custom_values(self, tmp_path):
        config = MonitorConfig(
            config_path=tmp_path / "custom.json",
            consumer_count=3,
            join_timeout=1.5,
            quit_key="x",
        )
        assert config.config_path == tmp_path / "custom.json"
        assert config.consumer_count == 3
        assert config.join_timeout == 1.5
        assert config.quit_key == "x"

    def test_rejects_zero_consumers(self):
        with pytest.raises(ValueError):
            MonitorConfig(consumer_count=0)

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValueError):
            MonitorConfig(join_timeout=0)

    def test_rejects_multi_char_quit_key(self):
        with pytest.raises(ValueError):
            MonitorConfig(quit_key="quit")

    def test_no_ignore_by_default(self):
        config = MonitorConfig()
        assert config.should_ignore(Path("/path/to/file.tmp")) is False
        assert config.should_ignore(Path("/repo/.git/config")) is False

    def test_custom_ignore_patterns(self):
        config = MonitorConfig(ignore_patterns=["*.log", "node_modules/*"])
        assert config.should_ignore(Path("/path/debug.log")) is True
        assert config.should_ignore(Path("/path/node_modules/package/index.js")) is True
        assert config.should_ignore(Path("/path/file.txt")) is False

    def test_ignore_accepts_strings(self):
        config = MonitorConfig(ignore_patterns=["*.tmp"])
        assert config.should_ignore("/path/to/file.tmp") is True
        assert config.should_ignore("/path/to/file.txt") is False

    def test_directory_pattern_matches_nested_entries_only(self):
        config = MonitorConfig(ignore_patterns=[".git/*"])
        assert config.should_ignore("/repo/.git/config") is True
        assert config.should_ignore("/repo/.git/objects/ab/cdef") is True
        assert config.should_ignore("/repo/src/.gitignore") is False
        assert config.should_ignore("/repo/git/config") is False


class TestMonitorConfigFromEnv:
    """Tests for MonitorConfig.from_env."""

    def test_reads_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FOLDER_MONITOR_CONFIG", str(tmp_path / "env.json"))
        monkeypatch.setenv("FOLDER_MONITOR_CONSUMERS", "2")
        monkeypatch.setenv("FOLDER_MONITOR_JOIN_TIMEOUT", "0.5")
        monkeypatch.setenv("FOLDER_MONITOR_LOG_LEVEL", "DEBUG")

        config = MonitorConfig.from_env()

        assert config.config_path == tmp_path / "env.json"
        assert config.consumer_count == 2
        assert config.join_timeout == 0.5
        assert config.log_level == "DEBUG"

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("FOLDER_MONITOR_CONSUMERS", "2")

        config = MonitorConfig.from_env(consumer_count=7, quit_key=None)

        assert config.consumer_count == 7
        assert config.quit_key == "q"

    def test_invalid_number_raises(self, monkeypatch):
        monkeypatch.setenv("FOLDER_MONITOR_CONSUMERS", "many")
        with pytest.raises(ValueError):
            MonitorConfig.from_env()


class TestLoadFolderCandidates:
    """Tests for load_folder_candidates."""

    def test_loads_folders(self, tmp_path):
        config_file = tmp_path / "folders.json"
        config_file.write_text(json.dumps({
            "folders": [
                {"path": "/tmp/watched", "name": "A"},
                {"path": "/tmp/other", "name": "B"},
            ]
        }))

        candidates = load_folder_candidates(config_file)

        assert candidates == [
            {"path": "/tmp/watched", "name": "A"},
            {"path": "/tmp/other", "name": "B"},
        ]

    def test_entries_are_not_validated(self, tmp_path):
        config_file = tmp_path / "folders.json"
        config_file.write_text(json.dumps({"folders": [{"path": ""}, None]}))

        assert load_folder_candidates(config_file) == [{"path": ""}, None]

    def test_empty_folder_list(self, tmp_path):
        config_file = tmp_path / "folders.json"
        config_file.write_text('{"folders": []}')

        assert load_folder_candidates(config_file) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigNotFoundError, match="not found"):
            load_folder_candidates(tmp_path / "missing.json")

    def test_directory_is_not_a_config(self, tmp_path):
        with pytest.raises(ConfigNotFoundError):
            load_folder_candidates(tmp_path)

    def test_invalid_json(self, tmp_path):
        config_file = tmp_path / "folders.json"
        config_file.write_text("{not json")

        with pytest.raises(InvalidConfigError, match="Invalid JSON format"):
            load_folder_candidates(config_file)

    def test_missing_folders_key(self, tmp_path):
        config_file = tmp_path / "folders.json"
        config_file.write_text('{"dirs": []}')

        with pytest.raises(InvalidConfigError):
            load_folder_candidates(config_file)

    def test_folders_not_a_list(self, tmp_path):
        config_file = tmp_path / "folders.json"
        config_file.write_text('{"folders": null}')

        with pytest.raises(InvalidConfigError):
            load_folder_candidates(config_file)

    def test_top_level_not_an_object(self, tmp_path):
        config_file = tmp_path / "folders.json"
        config_file.write_text("[]")

        with pytest.raises(InvalidConfigError):
            load_folder_candidates(config_file)
