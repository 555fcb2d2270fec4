"""
Unit tests for the notifier and the overlay controller.
"""

from __future__ import annotations

import subprocess

from rsi_assistant.actions import notifications
from rsi_assistant.actions.notifications import BreakNotifier
from rsi_assistant.actions.overlay import OverlayController


class _Recorder(BreakNotifier):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.delivered = []

    def _deliver(self, title, body):
        self.delivered.append(title)
        return True


# ── Notifier ─────────────────────────────────────────────────────────────────

class TestBreakNotifier:
    def test_delivers_when_enabled(self):
        n = _Recorder()
        assert n.notify("Microbreak Time", "Take a short 30s break!") is True
        assert n.delivered == ["Microbreak Time"]
        assert n.last().delivered is True

    def test_suppressed_records_without_delivering(self):
        n = _Recorder()
        n.suppressed = True
        assert n.notify("Rest Break Time", "Time for a longer rest.") is False
        assert n.delivered == []
        assert n.last().title == "Rest Break Time"
        assert n.last().delivered is False

    def test_disabled_never_delivers(self):
        n = _Recorder(enabled=False)
        n.notify("a", "b")
        assert n.delivered == []
        assert len(n.history()) == 1

    def test_history_is_bounded(self):
        n = _Recorder(history_size=3)
        for i in range(5):
            n.notify(f"t{i}", "")
        assert [item.title for item in n.history()] == ["t2", "t3", "t4"]

    def test_empty_history(self):
        assert BreakNotifier(enabled=False).last() is None

    def test_delivery_failure_is_not_raised(self, monkeypatch):
        def failing_run(*args, **kwargs):
            raise FileNotFoundError("notify-send")

        monkeypatch.setattr(notifications.subprocess, "run", failing_run)
        assert BreakNotifier()._run(["notify-send", "x"]) is False

    def test_delivery_timeout_is_not_raised(self, monkeypatch):
        def slow_run(*args, **kwargs):
            raise subprocess.TimeoutExpired(cmd="osascript", timeout=5)

        monkeypatch.setattr(notifications.subprocess, "run", slow_run)
        assert BreakNotifier()._run(["osascript"]) is False

    def test_linux_command_line(self, monkeypatch):
        calls = []
        monkeypatch.setattr(notifications.subprocess, "run", lambda cmd, **kw: calls.append(cmd))
        assert BreakNotifier()._linux_notify_send("Title", "Body") is True
        assert calls == [["notify-send", "--app-name=RSI Assistant", "Title", "Body"]]

    def test_quoting(self):
        assert notifications._ps_quote("it's") == "'it''s'"
        assert notifications._as_quote('say "hi"') == '"say \\"hi\\""'


# ── Overlay ──────────────────────────────────────────────────────────────────

class TestOverlayController:
    def test_starts_hidden(self):
        state = OverlayController().state()
        assert state.visible is False
        assert state.reason == ""
        assert state.visible_seconds() == 0.0

    def test_show_and_hide(self):
        overlay = OverlayController()
        shown = overlay.show("micro")
        assert shown.visible is True
        assert shown.reason == "micro"
        assert shown.shown_at is not None
        assert overlay.hide().visible is False

    def test_reshow_keeps_start_time(self):
        overlay = OverlayController()
        first = overlay.show("micro")
        again = overlay.show("rest")
        assert again.reason == "rest"
        assert again.shown_at == first.shown_at

    def test_state_is_a_copy(self):
        overlay = OverlayController()
        snapshot = overlay.state()
        snapshot.visible = True
        assert overlay.state().visible is False
