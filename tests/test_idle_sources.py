"""
Unit tests for idle sources. The OS-backed source is exercised only through
injected readers so the suite runs headless.
"""

import subprocess

import pytest

from rsi_assistant.idle import sources
from rsi_assistant.idle.sources import ManualIdleSource, ScriptedIdleSource, SystemIdleSource


class TestSystemIdleSource:
    def test_reader_value_truncated_to_whole_seconds(self):
        source = SystemIdleSource(reader=lambda: 12.9)
        assert source.seconds_since_last_input() == 12

    def test_negative_reading_clamped(self):
        source = SystemIdleSource(reader=lambda: -3.0)
        assert source.seconds_since_last_input() == 0

    @pytest.mark.parametrize("exc", [
        OSError("no display"),
        ValueError("bad output"),
        subprocess.CalledProcessError(1, "xprintidle"),
    ])
    def test_failing_reader_reports_active(self, exc):
        def broken():
            raise exc

        source = SystemIdleSource(reader=broken)
        assert source.seconds_since_last_input() == 0
        assert source.seconds_since_last_input() == 0

    def test_failure_logged_once(self, caplog):
        def broken():
            raise OSError("no display")

        source = SystemIdleSource(reader=broken)
        for _ in range(3):
            source.seconds_since_last_input()
        warnings = [r for r in caplog.records if "Idle query unavailable" in r.getMessage()]
        assert len(warnings) == 1


class TestManualIdleSource:
    def test_returns_last_set_value(self):
        source = ManualIdleSource()
        assert source.seconds_since_last_input() == 0
        source.set(42)
        assert source.seconds_since_last_input() == 42

    def test_negative_clamped(self):
        source = ManualIdleSource()
        source.set(-1)
        assert source.seconds_since_last_input() == 0


class TestScriptedIdleSource:
    def test_idle_accumulates_and_resets(self):
        source = ScriptedIdleSource.from_pattern("a...a.")
        readings = [source.seconds_since_last_input() for _ in range(6)]
        assert readings == [0, 1, 2, 3, 0, 1]

    def test_last_sample_repeats(self):
        source = ScriptedIdleSource.from_pattern("a.")
        readings = [source.seconds_since_last_input() for _ in range(4)]
        assert readings == [0, 1, 2, 3]
        assert source.exhausted

    def test_empty_script_is_active(self):
        source = ScriptedIdleSource([])
        assert source.seconds_since_last_input() == 0
        assert source.exhausted

    def test_extend_after_exhaustion(self):
        source = ScriptedIdleSource.from_pattern("aa")
        source.seconds_since_last_input()
        source.seconds_since_last_input()
        assert source.exhausted
        source.extend_pattern("..")
        assert not source.exhausted
        assert [source.seconds_since_last_input() for _ in range(2)] == [1, 2]

    def test_pattern_ignores_other_characters(self):
        source = ScriptedIdleSource.from_pattern("a a|.")
        assert [source.seconds_since_last_input() for _ in range(3)] == [0, 0, 1]


class TestPlatformReaders:
    def test_macos_uses_coregraphics_reader(self, monkeypatch):
        monkeypatch.setattr(sources.sys, "platform", "darwin")
        monkeypatch.setattr(sources, "_make_macos_reader", lambda: (lambda: 7.5))
        assert SystemIdleSource().seconds_since_last_input() == 7

    def test_linux_parses_xprintidle_millis(self, monkeypatch):
        monkeypatch.setattr(sources.sys, "platform", "linux")
        monkeypatch.setattr(
            sources.subprocess, "run",
            lambda *a, **kw: subprocess.CompletedProcess(a, 0, stdout="4200\n"),
        )
        assert SystemIdleSource().seconds_since_last_input() == 4
