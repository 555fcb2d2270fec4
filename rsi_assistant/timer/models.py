"""
Timer data model — operation mode, break configuration and status snapshots.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Dict

# Counters clamp at the largest value a SQLite INTEGER column holds.
COUNTER_MAX = 2**63 - 1


def saturating_add(value: int, amount: int = 1) -> int:
    return min(value + amount, COUNTER_MAX)


class OperationMode(str, Enum):
    NORMAL = "Normal"
    QUIET = "Quiet"            # notifications suppressed; timing unchanged
    SUSPENDED = "Suspended"    # all accumulation frozen


_NON_NEGATIVE_FIELDS = (
    "microbreak_interval",
    "microbreak_duration",
    "rest_interval",
    "rest_duration",
    "daily_limit",
    "warning_duration",
)


@dataclass(frozen=True)
class BreakConfig:
    """Break timings in seconds. Replaced wholesale, never patched in place."""
    microbreak_interval: int = 180       # 3 min of activity
    microbreak_duration: int = 30        # idle needed to count as a micro-break
    microbreak_enabled: bool = True

    rest_interval: int = 2700            # 45 min
    rest_duration: int = 600             # 10 min
    rest_enabled: bool = True

    daily_limit: int = 28800             # 8 h
    daily_enabled: bool = True

    warning_duration: int = 30
    mode: OperationMode = OperationMode.NORMAL

    def __post_init__(self):
        for name in _NON_NEGATIVE_FIELDS:
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        if not isinstance(self.mode, OperationMode):
            object.__setattr__(self, "mode", OperationMode(self.mode))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BreakConfig":
        """Build from a persisted mapping; unknown keys are ignored, missing ones defaulted."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class TimerStatus:
    daily_usage: int
    daily_limit: int

    micro_active: int
    micro_target: int
    micro_is_overdue: bool

    rest_active: int
    rest_target: int
    rest_is_overdue: bool

    current_idle: int
    mode: OperationMode

    daily_is_exceeded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        return data
