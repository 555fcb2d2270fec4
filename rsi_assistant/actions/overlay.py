"""
Break overlay — the full-screen "take a break" surface. Rendering is done by
whatever client polls /overlay; this module only owns the visibility state.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, replace
from typing import Optional


@dataclass
class OverlayState:
    visible: bool = False
    reason: str = ""                 # "micro" | "rest" | ""
    shown_at: Optional[float] = None

    def visible_seconds(self) -> float:
        if not self.visible or self.shown_at is None:
            return 0.0
        return time.time() - self.shown_at


class OverlayController:

    def __init__(self):
        self._state = OverlayState()
        self._lock = threading.Lock()

    def show(self, reason: str) -> OverlayState:
        with self._lock:
            if not self._state.visible:
                self._state = OverlayState(visible=True, reason=reason, shown_at=time.time())
            elif self._state.reason != reason:
                self._state = replace(self._state, reason=reason)
            return replace(self._state)

    def hide(self) -> OverlayState:
        with self._lock:
            if self._state.visible:
                self._state = OverlayState()
            return replace(self._state)

    def state(self) -> OverlayState:
        with self._lock:
            return replace(self._state)
