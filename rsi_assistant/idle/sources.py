"""
Idle sources — report how many whole seconds have passed since the last
keyboard or mouse input. The driver polls one of these before every tick.

SystemIdleSource queries the OS directly (Win32 via ctypes, CoreGraphics on
macOS, xprintidle on Linux). ManualIdleSource and ScriptedIdleSource are
in-process stand-ins for tests and the simulator.
"""

from __future__ import annotations

import ctypes
import logging
import subprocess
import sys
import threading
from typing import Callable, Iterable, List, Optional, Protocol

logger = logging.getLogger(__name__)


class IdleSource(Protocol):
    def seconds_since_last_input(self) -> int:
        ...


# ---------------------------------------------------------------------------
# Platform implementations
# ---------------------------------------------------------------------------

def _idle_seconds_win32() -> float:
    class LASTINPUTINFO(ctypes.Structure):
        _fields_ = [("cbSize", ctypes.c_uint), ("dwTime", ctypes.c_uint)]

    info = LASTINPUTINFO()
    info.cbSize = ctypes.sizeof(LASTINPUTINFO)
    if not ctypes.windll.user32.GetLastInputInfo(ctypes.byref(info)):  # type: ignore[attr-defined]
        raise ctypes.WinError()  # type: ignore[attr-defined]
    millis = ctypes.windll.kernel32.GetTickCount() - info.dwTime  # type: ignore[attr-defined]
    return millis / 1000.0


def _make_macos_reader() -> Callable[[], float]:
    import ctypes.util

    cg = ctypes.cdll.LoadLibrary(ctypes.util.find_library("CoreGraphics"))
    fn = cg.CGEventSourceSecondsSinceLastEventType
    fn.restype = ctypes.c_double
    fn.argtypes = [ctypes.c_int32, ctypes.c_uint32]
    # kCGEventSourceStateCombinedSessionState = 0, kCGAnyInputEventType = ~0
    return lambda: fn(0, 0xFFFFFFFF)


def _idle_seconds_xprintidle() -> float:
    result = subprocess.run(
        ["xprintidle"], capture_output=True, text=True, timeout=2, check=True,
    )
    return int(result.stdout.strip()) / 1000.0


def _platform_reader() -> Callable[[], float]:
    if sys.platform == "win32":
        return _idle_seconds_win32
    if sys.platform == "darwin":
        return _make_macos_reader()
    return _idle_seconds_xprintidle


class SystemIdleSource:
    """
    Reads the OS-wide time since last input. A failed query is logged once and
    reported as 0 seconds, i.e. the user is treated as active.
    """

    def __init__(self, reader: Optional[Callable[[], float]] = None):
        self._reader = reader
        self._warned = False

    def seconds_since_last_input(self) -> int:
        try:
            if self._reader is None:
                self._reader = _platform_reader()
            seconds = self._reader()
        except (OSError, ValueError, subprocess.SubprocessError, AttributeError) as exc:
            if not self._warned:
                logger.warning("Idle query unavailable, treating user as active: %s", exc)
                self._warned = True
            return 0
        return max(int(seconds), 0)


# ---------------------------------------------------------------------------
# In-process sources
# ---------------------------------------------------------------------------

class ManualIdleSource:
    """Returns whatever value was last set."""

    def __init__(self, seconds: int = 0):
        self._seconds = seconds
        self._lock = threading.Lock()

    def set(self, seconds: int) -> None:
        with self._lock:
            self._seconds = max(int(seconds), 0)

    def seconds_since_last_input(self) -> int:
        with self._lock:
            return self._seconds


class ScriptedIdleSource:
    """
    Plays back a sequence of per-tick samples, where True means "idle this
    second". Idle seconds accumulate across consecutive idle samples, the way a
    real input clock would. After the script runs out the last sample repeats.
    """

    def __init__(self, samples: Iterable[bool]):
        self._samples: List[bool] = list(samples)
        self._pos = 0
        self._idle_for = 0

    @classmethod
    def from_pattern(cls, pattern: str) -> "ScriptedIdleSource":
        """Build from a string such as "aaaa.." ('a' active, '.' idle)."""
        source = cls([])
        source.extend_pattern(pattern)
        return source

    def extend(self, samples: Iterable[bool]) -> None:
        self._samples.extend(samples)

    def extend_pattern(self, pattern: str) -> None:
        self.extend(ch == "." for ch in pattern if ch in "a.")

    def seconds_since_last_input(self) -> int:
        if not self._samples:
            return 0
        idx = min(self._pos, len(self._samples) - 1)
        self._pos += 1
        if self._samples[idx]:
            self._idle_for += 1
        else:
            self._idle_for = 0
        return self._idle_for

    @property
    def exhausted(self) -> bool:
        return self._pos >= len(self._samples)
