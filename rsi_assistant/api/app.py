"""
FastAPI application — local RSI break assistant API.
Runs on http://127.0.0.1:8765 by default.

Singletons (timer, statistics ledger, driver, commands) live on app.state so
that each call to create_app() produces a fully independent instance with no
shared module-level globals. This makes test isolation straightforward.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..actions.notifications import BreakNotifier
from ..actions.overlay import OverlayController
from ..commands import BreakCommands
from ..config import config
from ..driver import BreakDriver
from ..idle.sources import IdleSource, SystemIdleSource
from ..settings import load_break_config, save_break_config
from ..stats.ledger import StatsStore
from ..stats.storage import StatsRepository
from ..timer.service import TimerService

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Background tick loop
# ---------------------------------------------------------------------------

async def _tick_loop(driver: BreakDriver, interval_ms: int) -> None:
    while True:
        await asyncio.sleep(interval_ms / 1000.0)
        try:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, driver.step)
        except Exception:
            logger.exception("Timer tick failed")


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(
    idle_source: Optional[IdleSource] = None,
    data_dir: Optional[Path] = None,
    tick_interval_ms: Optional[int] = None,
    notifier: Optional[BreakNotifier] = None,
) -> FastAPI:
    data_dir = Path(data_dir or config.data_dir)
    interval_ms = tick_interval_ms or config.tick_interval_ms
    settings_path = data_dir / config.settings_file

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        data_dir.mkdir(parents=True, exist_ok=True)
        repository = StatsRepository(data_dir / config.stats_db)
        timer = TimerService(load_break_config(settings_path))
        stats = StatsStore(repository.load_all().values())

        driver = BreakDriver(
            timer,
            stats,
            idle_source or SystemIdleSource(),
            notifier=notifier or BreakNotifier(enabled=config.notifications_enabled),
            overlay=OverlayController(),
            repository=repository,
            idle_threshold_s=config.idle_threshold_s,
            repeat_prompt_interval_s=config.repeat_prompt_interval_s,
            reset_usage_at_midnight=config.reset_usage_at_midnight,
            flush_every_ticks=max(config.stats_flush_interval_s * 1000 // interval_ms, 1),
        )

        app.state.timer = timer
        app.state.stats = stats
        app.state.driver = driver
        app.state.tick_interval_ms = interval_ms
        app.state.commands = BreakCommands(
            timer,
            stats,
            save_config=lambda cfg: save_break_config(cfg, settings_path),
            repository=repository,
        )

        tick_task = asyncio.create_task(_tick_loop(driver, interval_ms))
        logger.info("Break timer running (tick every %d ms, data in %s)", interval_ms, data_dir)

        yield

        tick_task.cancel()
        try:
            await tick_task
        except asyncio.CancelledError:
            pass
        saved = driver.flush()
        logger.info("Saved %d day(s) of statistics", saved)

    app = FastAPI(
        title="RSI Break Assistant",
        description="Local break-reminder timer and statistics API",
        version=VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:3000", "null"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from .routers import overlay, settings, stats, timer

    app.include_router(timer.router)
    app.include_router(settings.router)
    app.include_router(stats.router)
    app.include_router(overlay.router)

    @app.get("/health")
    def health(request: Request):
        timer_service = getattr(request.app.state, "timer", None)
        mode = timer_service.config.mode.value if timer_service is not None else "unknown"
        return {"status": "ok", "version": VERSION, "mode": mode}

    return app


app = create_app()
