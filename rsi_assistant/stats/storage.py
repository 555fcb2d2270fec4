"""
Statistics persistence — SQLite table with one row per calendar day.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import fields
from pathlib import Path
from typing import Dict, Iterable, Iterator, List

from .ledger import DailyStats

_COLUMNS: List[str] = [f.name for f in fields(DailyStats)]
_COUNTER_COLUMNS: List[str] = [c for c in _COLUMNS if c != "date"]


class StatsRepository:
    """SQLite-backed store for DailyStats rows, keyed by date."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._init_db()

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def load_all(self) -> Dict[str, DailyStats]:
        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM daily_stats ORDER BY date"
            ).fetchall()
        return {row[0]: DailyStats(*row) for row in rows}

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def save(self, entry: DailyStats) -> None:
        self.save_many([entry])

    def save_many(self, entries: Iterable[DailyStats]) -> int:
        placeholders = ", ".join("?" for _ in _COLUMNS)
        updates = ", ".join(f"{c} = excluded.{c}" for c in _COUNTER_COLUMNS)
        rows = [tuple(getattr(e, c) for c in _COLUMNS) for e in entries]
        if not rows:
            return 0
        with self._conn() as conn:
            conn.executemany(
                f"INSERT INTO daily_stats ({', '.join(_COLUMNS)}) VALUES ({placeholders}) "
                f"ON CONFLICT(date) DO UPDATE SET {updates}",
                rows,
            )
        return len(rows)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _init_db(self) -> None:
        counters = ",\n".join(
            f"    {c} INTEGER NOT NULL DEFAULT 0" for c in _COUNTER_COLUMNS
        )
        with self._conn() as conn:
            conn.execute(
                f"CREATE TABLE IF NOT EXISTS daily_stats (\n"
                f"    date TEXT PRIMARY KEY,\n{counters}\n)"
            )

    @contextmanager
    def _conn(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()
