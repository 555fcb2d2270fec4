"""
Tests for the break settings store (rsi_assistant/settings.py) and the
/settings API endpoints.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

import rsi_assistant.settings as settings_mod
from rsi_assistant.settings import DEFAULTS, load_break_config, save_break_config
from rsi_assistant.timer.models import BreakConfig, OperationMode


# ── Fixtures ─────────────────────────────────────────────────────────────────

@pytest.fixture()
def tmp_settings_file(tmp_path: Path, monkeypatch):
    """Redirect the settings store to a fresh temp file for each test."""
    fake_file = tmp_path / "settings.json"
    monkeypatch.setattr(settings_mod, "_FILE", fake_file)
    yield fake_file


def _full_settings(**overrides):
    body = dict(DEFAULTS)
    body.update(overrides)
    return body


# ── Unit tests: settings store ────────────────────────────────────────────────

class TestSettingsStore:
    def test_missing_file_gives_defaults(self, tmp_settings_file):
        assert load_break_config() == BreakConfig()

    def test_defaults_match_break_config(self):
        assert DEFAULTS["microbreak_interval"] == 180
        assert DEFAULTS["rest_interval"] == 2700
        assert DEFAULTS["mode"] == "Normal"

    def test_save_and_reload(self, tmp_settings_file):
        cfg = BreakConfig(microbreak_interval=300, rest_enabled=False, mode=OperationMode.QUIET)
        save_break_config(cfg)
        assert tmp_settings_file.exists()
        assert load_break_config() == cfg

    def test_file_is_plain_json(self, tmp_settings_file):
        save_break_config(BreakConfig(mode=OperationMode.SUSPENDED))
        on_disk = json.loads(tmp_settings_file.read_text())
        assert on_disk["mode"] == "Suspended"
        assert set(on_disk) == set(DEFAULTS)

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "nested" / "cfg.json"
        save_break_config(BreakConfig(daily_limit=100), path)
        assert load_break_config(path).daily_limit == 100

    def test_malformed_file_falls_back(self, tmp_settings_file):
        tmp_settings_file.write_text("{not json")
        assert load_break_config() == BreakConfig()

    def test_non_object_falls_back(self, tmp_settings_file):
        tmp_settings_file.write_text("[1, 2, 3]")
        assert load_break_config() == BreakConfig()

    def test_negative_value_falls_back(self, tmp_settings_file):
        tmp_settings_file.write_text(json.dumps({"rest_duration": -5}))
        assert load_break_config() == BreakConfig()

    def test_unknown_mode_falls_back(self, tmp_settings_file):
        tmp_settings_file.write_text(json.dumps({"mode": "Turbo"}))
        assert load_break_config() == BreakConfig()

    def test_unknown_keys_ignored_partial_keys_defaulted(self, tmp_settings_file):
        tmp_settings_file.write_text(json.dumps({"rest_interval": 1200, "theme": "dark"}))
        cfg = load_break_config()
        assert cfg.rest_interval == 1200
        assert cfg.microbreak_interval == DEFAULTS["microbreak_interval"]


# ── Integration tests: /settings API ─────────────────────────────────────────

class TestSettingsAPI:
    async def test_get_returns_settings_and_defaults(self, client):
        r = await client.get("/settings")
        assert r.status_code == 200
        body = r.json()
        assert body["settings"] == DEFAULTS
        assert body["defaults"] == DEFAULTS

    async def test_put_replaces_and_persists(self, client, tmp_path):
        new = _full_settings(microbreak_interval=300, warning_duration=10)
        r = await client.put("/settings", json=new)
        assert r.status_code == 200
        assert r.json()["settings"] == new

        r = await client.get("/settings")
        assert r.json()["settings"]["microbreak_interval"] == 300
        assert json.loads((tmp_path / "settings.json").read_text()) == new

    async def test_put_updates_timer_targets(self, client):
        await client.put("/settings", json=_full_settings(microbreak_interval=42))
        r = await client.get("/timer")
        assert r.json()["micro_target"] == 42

    async def test_partial_body_rejected(self, client):
        r = await client.put("/settings", json={"microbreak_interval": 60})
        assert r.status_code == 422

    async def test_negative_value_rejected(self, client):
        r = await client.put("/settings", json=_full_settings(rest_duration=-1))
        assert r.status_code == 422

    async def test_invalid_mode_rejected(self, client):
        r = await client.put("/settings", json=_full_settings(mode="Turbo"))
        assert r.status_code == 422

    async def test_rejected_put_changes_nothing(self, client):
        await client.put("/settings", json=_full_settings(rest_interval=-10))
        r = await client.get("/settings")
        assert r.json()["settings"]["rest_interval"] == DEFAULTS["rest_interval"]
