"""Tests for Config.load(): config.json first, then RSI_* environment overrides."""

import json

import pytest

import rsi_assistant.config as config_mod
from rsi_assistant.config import Config


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(config_mod, "_CONFIG_FILE", path)
    monkeypatch.setenv("RSI_DATA_DIR", str(tmp_path / "data"))
    return path


def test_defaults(config_file):
    cfg = Config.load()
    assert cfg.api_port == 8765
    assert cfg.idle_threshold_s == 5
    assert cfg.reset_usage_at_midnight is False
    assert cfg.data_dir.is_dir()


def test_file_overrides(config_file):
    config_file.write_text(json.dumps({"api_port": 9000, "unknown": 1}))
    cfg = Config.load()
    assert cfg.api_port == 9000
    assert not hasattr(cfg, "unknown")


def test_env_beats_file(config_file, monkeypatch):
    config_file.write_text(json.dumps({"idle_threshold_s": 10}))
    monkeypatch.setenv("RSI_IDLE_THRESHOLD_S", "7")
    assert Config.load().idle_threshold_s == 7


@pytest.mark.parametrize("raw,expected", [("1", True), ("yes", True), ("false", False), ("0", False)])
def test_env_bool(config_file, monkeypatch, raw, expected):
    monkeypatch.setenv("RSI_RESET_USAGE_AT_MIDNIGHT", raw)
    assert Config.load().reset_usage_at_midnight is expected
