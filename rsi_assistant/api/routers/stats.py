"""
/stats — per-day break statistics and break-event recording.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ...api.schemas import DailyStatsOut
from ...categories import UnknownBreakCategory

router = APIRouter(prefix="/stats", tags=["stats"])


def _get_commands(request: Request):
    return request.app.state.commands


@router.get("", response_model=List[DailyStatsOut])
def get_statistics(
    days: int = Query(default=7, ge=0, le=3660, description="Number of most recent days"),
    commands=Depends(_get_commands),
):
    """Return up to `days` recorded days, newest first. Days without activity are absent."""
    return [DailyStatsOut.from_stats(d) for d in commands.get_statistics(days)]


@router.post("/{category}/taken", response_model=DailyStatsOut)
def record_break_taken(
    category: str,
    natural: bool = Query(default=False, description="Taken without a prompt"),
    commands=Depends(_get_commands),
):
    return _record(lambda: commands.record_break_taken(category, natural=natural))


@router.post("/{category}/postponed", response_model=DailyStatsOut)
def record_break_postponed(category: str, commands=Depends(_get_commands)):
    return _record(lambda: commands.record_break_postponed(category))


@router.post("/{category}/skipped", response_model=DailyStatsOut)
def record_break_skipped(category: str, commands=Depends(_get_commands)):
    return _record(lambda: commands.record_break_skipped(category))


def _record(fn) -> DailyStatsOut:
    try:
        entry = fn()
    except UnknownBreakCategory as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return DailyStatsOut.from_stats(entry)
