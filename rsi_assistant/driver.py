"""
Break Driver — the once-per-second loop body.

Each step polls the idle source, advances the timer, mirrors usage into the
statistics ledger and reacts to overdue transitions (notifications, overlay,
prompt counters). Edge detection state lives here, not in the timer.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from .actions.notifications import BreakNotifier
from .actions.overlay import OverlayController
from .categories import BreakCategory
from .idle.sources import IdleSource
from .stats.ledger import StatsStore
from .stats.storage import StatsRepository
from .timer.models import BreakConfig, OperationMode, TimerStatus
from .timer.service import TimerService

logger = logging.getLogger(__name__)

_MICRO = BreakCategory.MICRO
_REST = BreakCategory.REST
_DAILY = BreakCategory.DAILY


class BreakDriver:
    """
    Usage:
        driver = BreakDriver(timer, stats, SystemIdleSource())
        while True:
            driver.step()
            time.sleep(1)
    """

    def __init__(
        self,
        timer: TimerService,
        stats: StatsStore,
        idle_source: IdleSource,
        notifier: Optional[BreakNotifier] = None,
        overlay: Optional[OverlayController] = None,
        repository: Optional[StatsRepository] = None,
        idle_threshold_s: int = 5,
        repeat_prompt_interval_s: int = 0,
        reset_usage_at_midnight: bool = False,
        flush_every_ticks: int = 30,
    ):
        self._timer = timer
        self._stats = stats
        self._idle = idle_source
        self._notifier = notifier or BreakNotifier(enabled=False)
        self._overlay = overlay or OverlayController()
        self._repository = repository

        self.idle_threshold_s = idle_threshold_s
        self.repeat_prompt_interval_s = repeat_prompt_interval_s
        self.reset_usage_at_midnight = reset_usage_at_midnight
        self.flush_every_ticks = flush_every_ticks

        self._day = stats.today_key()
        self._ticks = 0
        self._was_overdue: Dict[BreakCategory, bool] = {c: False for c in BreakCategory}
        self._since_prompt: Dict[BreakCategory, int] = {c: 0 for c in BreakCategory}
        self._warned: Dict[BreakCategory, bool] = {_MICRO: False, _REST: False}
        self._listeners: List[Callable[[TimerStatus], None]] = []
        self._latest: Optional[TimerStatus] = None

    # ------------------------------------------------------------------
    # Loop body
    # ------------------------------------------------------------------

    def step(self) -> TimerStatus:
        is_idle = self._idle.seconds_since_last_input() > self.idle_threshold_s
        self._check_rollover()

        before, status = self._timer.tick(is_idle)
        cfg = self._timer.config
        suspended = status.mode == OperationMode.SUSPENDED
        # A disabled break type never prompts, even if its accumulator is still past target.
        micro_due = status.micro_is_overdue and cfg.microbreak_enabled
        rest_due = status.rest_is_overdue and cfg.rest_enabled

        self._stats.set_usage(status.daily_usage)
        if not suspended and (micro_due or rest_due):
            self._stats.add_overdue_seconds()

        self._notifier.suppressed = status.mode != OperationMode.NORMAL

        if is_idle:
            self._record_idle_breaks(before, status, cfg)

        self._prompt(
            _MICRO, micro_due, suspended,
            "Microbreak Time", f"Take a short {cfg.microbreak_duration}s break!",
        )
        self._prompt(
            _REST, rest_due, suspended,
            "Rest Break Time", "Time for a longer rest.",
        )
        self._prompt(
            _DAILY, status.daily_is_exceeded, suspended,
            "Daily Limit Reached", "You have reached today's computer-use limit.",
        )

        if cfg.microbreak_enabled and not suspended:
            self._warn(_MICRO, status.micro_active, status.micro_target,
                       status.micro_is_overdue, cfg.warning_duration)
        if cfg.rest_enabled and not suspended:
            self._warn(_REST, status.rest_active, status.rest_target,
                       status.rest_is_overdue, cfg.warning_duration)

        self._update_overlay(micro_due, rest_due, suspended)

        self._latest = status
        self._ticks += 1
        if self._repository is not None and self.flush_every_ticks > 0:
            if self._ticks % self.flush_every_ticks == 0:
                self.flush()

        for listener in self._listeners:
            try:
                listener(status)
            except Exception:
                logger.exception("Timer listener %r failed", listener)

        return status

    # ------------------------------------------------------------------
    # Reactions
    # ------------------------------------------------------------------

    def _prompt(
        self,
        category: BreakCategory,
        overdue: bool,
        suspended: bool,
        title: str,
        body: str,
    ) -> None:
        if suspended:
            return
        was = self._was_overdue[category]
        self._was_overdue[category] = overdue

        if overdue and not was:
            logger.info("%s break is due", category.value)
            self._stats.record_prompt(category)
            self._notifier.notify(title, body)
            self._since_prompt[category] = 0
        elif overdue:
            self._since_prompt[category] += 1
            if (
                self.repeat_prompt_interval_s > 0
                and self._since_prompt[category] >= self.repeat_prompt_interval_s
            ):
                self._stats.record_prompt(category, repeated=True)
                self._notifier.notify(title, body)
                self._since_prompt[category] = 0

    def _warn(
        self,
        category: BreakCategory,
        active: int,
        target: int,
        overdue: bool,
        warning_duration: int,
    ) -> None:
        remaining = target - active
        if active == 0 or remaining > warning_duration:
            self._warned[category] = False
            return
        if overdue or warning_duration <= 0 or self._warned[category]:
            return
        self._warned[category] = True
        label = "Microbreak" if category == _MICRO else "Rest break"
        self._notifier.notify(f"{label} Soon", f"{label} in {remaining} seconds.")

    def _record_idle_breaks(self, before: TimerStatus, after: TimerStatus, cfg: BreakConfig) -> None:
        # Idling cleared an accumulator before it was ever due: a natural break.
        # Prompted takes are reported by the client through record_break_taken.
        if (
            before.micro_active > 0
            and not before.micro_is_overdue
            and after.micro_active == 0
            and after.current_idle >= cfg.microbreak_duration
        ):
            self._stats.record_break_taken(_MICRO, natural=True)
        if (
            before.rest_active > 0
            and not before.rest_is_overdue
            and after.rest_active == 0
            and after.current_idle >= cfg.rest_duration
        ):
            self._stats.record_break_taken(_REST, natural=True)

    def _update_overlay(self, micro_due: bool, rest_due: bool, suspended: bool) -> None:
        if suspended:
            self._overlay.hide()
        elif rest_due:
            self._overlay.show(_REST.value)
        elif micro_due:
            self._overlay.show(_MICRO.value)
        else:
            self._overlay.hide()

    def _check_rollover(self) -> None:
        today = self._stats.today_key()
        if today == self._day:
            return
        logger.info("Day rollover %s -> %s", self._day, today)
        if self._repository is not None:
            self.flush()
        self._day = today
        if self.reset_usage_at_midnight:
            self._timer.reset_daily_usage()
            self._was_overdue[_DAILY] = False

    # ------------------------------------------------------------------
    # Persistence / observers
    # ------------------------------------------------------------------

    def flush(self) -> int:
        if self._repository is None:
            return 0
        return self._repository.save_many(self._stats.entries())

    def register_listener(self, fn: Callable[[TimerStatus], None]) -> None:
        """Register a callback(status) called after every step."""
        self._listeners.append(fn)

    @property
    def latest_status(self) -> Optional[TimerStatus]:
        return self._latest

    @property
    def overlay(self) -> OverlayController:
        return self._overlay

    @property
    def notifier(self) -> BreakNotifier:
        return self._notifier
