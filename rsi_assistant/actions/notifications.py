"""
Break notifications — platform-aware desktop notifications via the OS's own
command-line tools. Delivery failures are logged, never raised.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    title: str
    body: str
    delivered: bool


class BreakNotifier:
    """
    Shows desktop notifications. While `suppressed` is set (Quiet mode, or
    notifications disabled in config) messages are recorded but not shown.
    """

    def __init__(self, enabled: bool = True, history_size: int = 50):
        self.enabled = enabled
        self.suppressed = False
        self._history: List[Notification] = []
        self._history_size = history_size

    def notify(self, title: str, body: str) -> bool:
        delivered = False
        if self.enabled and not self.suppressed:
            delivered = self._deliver(title, body)
        else:
            logger.info("Notification suppressed: %s", title)
        self._remember(Notification(title=title, body=body, delivered=delivered))
        return delivered

    def history(self) -> List[Notification]:
        return list(self._history)

    def last(self) -> Optional[Notification]:
        return self._history[-1] if self._history else None

    def _remember(self, item: Notification) -> None:
        self._history.append(item)
        if len(self._history) > self._history_size:
            del self._history[0]

    def _deliver(self, title: str, body: str) -> bool:
        if sys.platform == "win32":
            return self._windows_toast(title, body)
        if sys.platform == "darwin":
            return self._macos_notification(title, body)
        return self._linux_notify_send(title, body)

    # ------------------------------------------------------------------
    # Platform implementations
    # ------------------------------------------------------------------

    def _windows_toast(self, title: str, body: str) -> bool:
        script = (
            "[Windows.UI.Notifications.ToastNotificationManager, Windows.UI.Notifications, "
            "ContentType = WindowsRuntime] > $null; "
            "$t = [Windows.UI.Notifications.ToastNotificationManager]::GetTemplateContent(1); "
            "$x = $t.GetElementsByTagName('text'); "
            f"$x.Item(0).AppendChild($t.CreateTextNode({_ps_quote(title)})) > $null; "
            f"$x.Item(1).AppendChild($t.CreateTextNode({_ps_quote(body)})) > $null; "
            "[Windows.UI.Notifications.ToastNotificationManager]::CreateToastNotifier"
            "('RSI Assistant').Show([Windows.UI.Notifications.ToastNotification]::new($t))"
        )
        return self._run(["powershell", "-NoProfile", "-Command", script])

    def _macos_notification(self, title: str, body: str) -> bool:
        script = f"display notification {_as_quote(body)} with title {_as_quote(title)}"
        return self._run(["osascript", "-e", script])

    def _linux_notify_send(self, title: str, body: str) -> bool:
        return self._run(["notify-send", "--app-name=RSI Assistant", title, body])

    @staticmethod
    def _run(cmd: List[str]) -> bool:
        try:
            subprocess.run(cmd, check=True, capture_output=True, timeout=5)
            return True
        except (OSError, subprocess.SubprocessError) as exc:
            logger.warning("Notification delivery failed (%s): %s", cmd[0], exc)
            return False


def _ps_quote(text: str) -> str:
    return "'" + text.replace("'", "''") + "'"


def _as_quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'
