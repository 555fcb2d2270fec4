"""
Command surface — the synchronous request/response operations the API
exposes. Category-keyed calls reject anything outside {micro, rest} with
UnknownBreakCategory before touching any state.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional, Union

from .categories import BreakCategory, parse_break_category
from .stats.ledger import DailyStats, StatsStore
from .stats.storage import StatsRepository
from .timer.models import BreakConfig, OperationMode, TimerStatus
from .timer.service import TimerService

logger = logging.getLogger(__name__)

Category = Union[str, BreakCategory]


class BreakCommands:

    def __init__(
        self,
        timer: TimerService,
        stats: StatsStore,
        save_config: Optional[Callable[[BreakConfig], object]] = None,
        repository: Optional[StatsRepository] = None,
    ):
        self._timer = timer
        self._stats = stats
        self._save_config = save_config
        self._repository = repository
        # Serializes config changes with their save so the file matches memory.
        self._config_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def get_status(self) -> TimerStatus:
        return self._timer.get_status()

    def get_config(self) -> BreakConfig:
        return self._timer.get_config()

    def set_config(self, cfg: BreakConfig) -> BreakConfig:
        with self._config_lock:
            self._timer.update_config(cfg)
            return self._persist_config()

    def set_mode(self, mode: Union[str, OperationMode]) -> BreakConfig:
        mode = OperationMode(mode)
        with self._config_lock:
            self._timer.set_mode(mode)
            cfg = self._persist_config()
        logger.info("Operation mode set to %s", mode.value)
        return cfg

    def reset_break(self, category: Category) -> TimerStatus:
        self._timer.reset_break(parse_break_category(category))
        return self._timer.get_status()

    def trigger_rest_break(self) -> TimerStatus:
        self._timer.trigger_rest_break()
        return self._timer.get_status()

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_statistics(self, days: int) -> List[DailyStats]:
        return self._stats.get_last_n_days(days)

    def record_break_taken(self, category: Category, natural: bool = False) -> DailyStats:
        return self._saved(self._stats.record_break_taken(category, natural=natural))

    def record_break_postponed(self, category: Category) -> DailyStats:
        return self._saved(self._stats.record_break_postponed(category))

    def record_break_skipped(self, category: Category) -> DailyStats:
        return self._saved(self._stats.record_break_skipped(category))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _persist_config(self) -> BreakConfig:
        cfg = self._timer.get_config()
        if self._save_config is not None:
            self._save_config(cfg)
        return cfg

    def _saved(self, entry: DailyStats) -> DailyStats:
        if self._repository is not None:
            self._repository.save(entry)
        return entry
