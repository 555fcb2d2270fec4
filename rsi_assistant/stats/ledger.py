"""
Statistics Ledger — per-day counters of break prompts, takes, skips and
postponements, plus mirrored usage time.

Entries are keyed by local calendar date ("YYYY-MM-DD"). They are created on
first access for today and never deleted here.
"""

from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from dataclasses import asdict, dataclass, fields
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Union

from ..categories import BreakCategory, parse_break_category
from ..timer.models import saturating_add

_ALL_CATEGORIES = frozenset(BreakCategory)


def local_date_key() -> str:
    return datetime.now().strftime("%Y-%m-%d")


@dataclass
class DailyStats:
    """Counters for a single local calendar day."""
    date: str                           # "YYYY-MM-DD"
    total_usage_seconds: int = 0

    micro_prompts: int = 0
    micro_repeated_prompts: int = 0
    micro_prompted_taken: int = 0
    micro_natural_taken: int = 0
    micro_skipped: int = 0
    micro_postponed: int = 0

    rest_prompts: int = 0
    rest_repeated_prompts: int = 0
    rest_prompted_taken: int = 0
    rest_natural_taken: int = 0
    rest_skipped: int = 0
    rest_postponed: int = 0

    daily_prompts: int = 0
    daily_repeated_prompts: int = 0
    daily_prompted_taken: int = 0
    daily_natural_taken: int = 0
    daily_skipped: int = 0
    daily_postponed: int = 0

    overdue_seconds: int = 0

    def increment(self, category: BreakCategory, kind: str, amount: int = 1) -> int:
        name = f"{category.value}_{kind}"
        value = saturating_add(getattr(self, name), amount)
        setattr(self, name, value)
        return value

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailyStats":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


class StatsStore:
    """
    Thread-safe in-memory ledger. Persistence is handled by StatsRepository;
    this class only owns the mapping.

    Usage:
        store = StatsStore()
        store.record_break_taken("micro")
        store.get_last_n_days(7)
    """

    def __init__(
        self,
        entries: Optional[Iterable[DailyStats]] = None,
        today: Callable[[], str] = local_date_key,
    ):
        self._stats: Dict[str, DailyStats] = {}
        self._today = today
        self._lock = threading.Lock()
        for entry in entries or ():
            self.put(entry)

    # ------------------------------------------------------------------
    # Today
    # ------------------------------------------------------------------

    def today_key(self) -> str:
        return self._today()

    def get_or_create_today(self) -> DailyStats:
        """Return the live entry for today, creating a zeroed one if needed."""
        with self._lock:
            return self._get_or_create_today()

    @contextmanager
    def edit_today(self) -> Iterator[DailyStats]:
        """Hold the ledger lock while the caller mutates today's entry."""
        with self._lock:
            yield self._get_or_create_today()

    def _get_or_create_today(self) -> DailyStats:
        key = self._today()
        entry = self._stats.get(key)
        if entry is None:
            entry = self._stats[key] = DailyStats(date=key)
        return entry

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_last_n_days(self, n: int) -> List[DailyStats]:
        """Up to *n* entries, newest date first. Missing days are not padded."""
        if n <= 0:
            return []
        with self._lock:
            # Fixed-width zero-padded keys sort chronologically as strings.
            dates = sorted(self._stats, reverse=True)[:n]
            return [copy.copy(self._stats[d]) for d in dates]

    def entries(self) -> List[DailyStats]:
        with self._lock:
            return [copy.copy(e) for e in self._stats.values()]

    def put(self, entry: DailyStats) -> None:
        """Insert or replace the entry for entry.date."""
        with self._lock:
            self._stats[entry.date] = entry

    def __len__(self) -> int:
        with self._lock:
            return len(self._stats)

    # ------------------------------------------------------------------
    # Break events
    # ------------------------------------------------------------------

    def record_break_taken(
        self, category: Union[str, BreakCategory], natural: bool = False
    ) -> DailyStats:
        kind = "natural_taken" if natural else "prompted_taken"
        return self._record(parse_break_category(category), kind)

    def record_break_postponed(self, category: Union[str, BreakCategory]) -> DailyStats:
        return self._record(parse_break_category(category), "postponed")

    def record_break_skipped(self, category: Union[str, BreakCategory]) -> DailyStats:
        return self._record(parse_break_category(category), "skipped")

    def record_prompt(
        self, category: Union[str, BreakCategory], repeated: bool = False
    ) -> DailyStats:
        cat = parse_break_category(category, allowed=_ALL_CATEGORIES)
        return self._record(cat, "repeated_prompts" if repeated else "prompts")

    def _record(self, category: BreakCategory, kind: str) -> DailyStats:
        with self._lock:
            entry = self._get_or_create_today()
            entry.increment(category, kind)
            return copy.copy(entry)

    # ------------------------------------------------------------------
    # Usage mirroring
    # ------------------------------------------------------------------

    def set_usage(self, seconds: int) -> None:
        with self._lock:
            self._get_or_create_today().total_usage_seconds = seconds

    def add_overdue_seconds(self, seconds: int = 1) -> None:
        with self._lock:
            entry = self._get_or_create_today()
            entry.overdue_seconds = saturating_add(entry.overdue_seconds, seconds)
