"""
Pydantic schemas for the FastAPI local API.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ..stats.ledger import DailyStats
from ..timer.models import BreakConfig, OperationMode, TimerStatus

# ── Timer ──────────────────────────────────────────────────────────────────

class TimerStatusOut(BaseModel):
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

    @classmethod
    def from_status(cls, status: TimerStatus) -> "TimerStatusOut":
        return cls(**status.to_dict())


class ModeRequest(BaseModel):
    mode: OperationMode


# ── Settings ───────────────────────────────────────────────────────────────

class BreakConfigModel(BaseModel):
    """Full break configuration; PUT replaces every field."""
    microbreak_interval: int = Field(..., ge=0)
    microbreak_duration: int = Field(..., ge=0)
    microbreak_enabled: bool
    rest_interval: int = Field(..., ge=0)
    rest_duration: int = Field(..., ge=0)
    rest_enabled: bool
    daily_limit: int = Field(..., ge=0)
    daily_enabled: bool
    warning_duration: int = Field(..., ge=0)
    mode: OperationMode = OperationMode.NORMAL

    @classmethod
    def from_config(cls, cfg: BreakConfig) -> "BreakConfigModel":
        return cls(**cfg.to_dict())

    def to_config(self) -> BreakConfig:
        return BreakConfig(**self.model_dump())


class SettingsOut(BaseModel):
    settings: BreakConfigModel
    defaults: Optional[Dict[str, Any]] = None


# ── Statistics ─────────────────────────────────────────────────────────────

class DailyStatsOut(BaseModel):
    date: str
    total_usage_seconds: int

    micro_prompts: int
    micro_repeated_prompts: int
    micro_prompted_taken: int
    micro_natural_taken: int
    micro_skipped: int
    micro_postponed: int

    rest_prompts: int
    rest_repeated_prompts: int
    rest_prompted_taken: int
    rest_natural_taken: int
    rest_skipped: int
    rest_postponed: int

    daily_prompts: int
    daily_repeated_prompts: int
    daily_prompted_taken: int
    daily_natural_taken: int
    daily_skipped: int
    daily_postponed: int

    overdue_seconds: int

    @classmethod
    def from_stats(cls, entry: DailyStats) -> "DailyStatsOut":
        return cls(**entry.to_dict())


# ── Overlay ────────────────────────────────────────────────────────────────

class OverlayStateOut(BaseModel):
    visible: bool
    reason: str
    visible_seconds: float
