"""Tests for the configuration loader."""
import json

from config_manager import ConfigManager


def test_missing_file_uses_defaults(tmp_path):
    config = ConfigManager(tmp_path / "config.json")
    assert config.get_mixer_device() is None


def test_reads_mixer_device(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"mixer_device": "/dev/mixer1"}))
    assert ConfigManager(path).get_mixer_device() == "/dev/mixer1"


def test_invalid_json_falls_back(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    assert ConfigManager(path).get_mixer_device() is None
    assert "ignoring config file" in caplog.text


def test_non_object_falls_back(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2, 3]")
    assert ConfigManager(path).config == {"mixer_device": None}
