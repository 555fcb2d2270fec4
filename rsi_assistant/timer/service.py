"""
Timer State Machine — per-second accumulation of active and idle time.

One instance lives for the whole process. The driver calls tick() once per
second; the command surface reads status and replaces config concurrently.
Every public method takes the same lock, readers included.
"""

from __future__ import annotations

import dataclasses
import threading
from typing import Optional, Tuple, Union

from ..categories import BreakCategory, parse_break_category
from .models import (
    COUNTER_MAX,
    BreakConfig,
    OperationMode,
    TimerStatus,
    saturating_add,
)


class TimerService:
    """
    Usage:
        timer = TimerService(BreakConfig())
        timer.tick(is_idle=False)
        status = timer.get_status()
    """

    def __init__(self, config: Optional[BreakConfig] = None):
        self._config = config or BreakConfig()
        self._lock = threading.Lock()

        self.daily_usage: int = 0
        self.micro_active: int = 0
        self.rest_active: int = 0
        self.current_idle: int = 0

    # ------------------------------------------------------------------
    # State transition
    # ------------------------------------------------------------------

    def tick(self, is_idle: bool) -> Tuple[TimerStatus, TimerStatus]:
        """Advance one second. Returns the (before, after) snapshots taken under one lock hold."""
        with self._lock:
            before = self._snapshot()
            self._advance(is_idle)
            return before, self._snapshot()

    def _advance(self, is_idle: bool) -> None:
        cfg = self._config
        if cfg.mode == OperationMode.SUSPENDED:
            return

        if is_idle:
            self.current_idle = saturating_add(self.current_idle)

            # A pause only counts once it has lasted the configured duration.
            if cfg.microbreak_enabled and self.current_idle >= cfg.microbreak_duration:
                self.micro_active = 0

            if (
                cfg.rest_enabled
                and self.current_idle >= cfg.rest_duration
                and self.rest_active > 0
            ):
                self.rest_active = 0
        else:
            self.current_idle = 0
            self.daily_usage = saturating_add(self.daily_usage)

            if cfg.microbreak_enabled:
                self.micro_active = saturating_add(self.micro_active)
            if cfg.rest_enabled:
                self.rest_active = saturating_add(self.rest_active)

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def get_status(self) -> TimerStatus:
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> TimerStatus:
        cfg = self._config
        return TimerStatus(
            daily_usage=self.daily_usage,
            daily_limit=cfg.daily_limit,
            micro_active=self.micro_active,
            micro_target=cfg.microbreak_interval,
            micro_is_overdue=self.micro_active > cfg.microbreak_interval,
            rest_active=self.rest_active,
            rest_target=cfg.rest_interval,
            rest_is_overdue=self.rest_active > cfg.rest_interval,
            current_idle=self.current_idle,
            mode=cfg.mode,
            daily_is_exceeded=cfg.daily_enabled and self.daily_usage > cfg.daily_limit,
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def config(self) -> BreakConfig:
        with self._lock:
            return self._config

    def get_config(self) -> BreakConfig:
        return self.config

    def update_config(self, new_config: BreakConfig) -> None:
        # Accumulators are left as they are; overdue flags follow the new targets.
        with self._lock:
            self._config = new_config

    def set_mode(self, mode: OperationMode) -> None:
        with self._lock:
            self._config = dataclasses.replace(self._config, mode=OperationMode(mode))

    # ------------------------------------------------------------------
    # Explicit resets
    # ------------------------------------------------------------------

    def reset_microbreak(self) -> None:
        with self._lock:
            self.micro_active = 0

    def reset_rest_break(self) -> None:
        with self._lock:
            self.rest_active = 0

    def reset_break(self, category: Union[str, BreakCategory]) -> None:
        """Reset the accumulator for *category*; raises UnknownBreakCategory otherwise."""
        if parse_break_category(category) == BreakCategory.MICRO:
            self.reset_microbreak()
        else:
            self.reset_rest_break()

    def trigger_rest_break(self) -> None:
        """Push the rest accumulator just past its interval so it reads as overdue now."""
        with self._lock:
            self.rest_active = min(self._config.rest_interval + 1, COUNTER_MAX)

    def reset_daily_usage(self) -> None:
        with self._lock:
            self.daily_usage = 0
