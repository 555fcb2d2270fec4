"""
Shared pytest fixtures and configuration.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from rsi_assistant.actions.notifications import BreakNotifier
from rsi_assistant.api.app import create_app
from rsi_assistant.idle.sources import ManualIdleSource

# Long enough that the background loop never ticks during a test.
NO_TICKS_MS = 3_600_000


@pytest.fixture()
def idle_source():
    return ManualIdleSource(0)


@pytest.fixture()
def app(tmp_path, idle_source):
    """Create a fresh app instance per test, storing its data under tmp_path."""
    return create_app(
        idle_source=idle_source,
        data_dir=tmp_path,
        tick_interval_ms=NO_TICKS_MS,
        notifier=BreakNotifier(enabled=False),
    )


@pytest_asyncio.fixture()
async def client(app):
    """Async HTTP client wired directly to the ASGI app (no server needed)."""
    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as ac:
            yield ac
