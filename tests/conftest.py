"""
Pytest fixtures for the WebUnlock test suite.

No real browser is launched: pages are MagicMock objects whose coroutine
methods are AsyncMocks, and sessions come from a recording fake factory.
"""

from contextlib import asynccontextmanager
from typing import Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from webunlock.session import BrowserSession


def make_snapshot(inner_text=None, text_content=None, value=None, attributes=None) -> Dict:
    return {
        "innerText": inner_text,
        "textContent": text_content,
        "value": value,
        "attributes": attributes or {},
    }


def make_page(snapshots: Optional[Dict[str, List[Dict]]] = None, table_grid=None) -> MagicMock:
    """Fake page answering selector queries from ``snapshots``."""
    snapshots = snapshots or {}
    page = MagicMock()
    page.goto = AsyncMock()
    page.wait_for_timeout = AsyncMock()
    page.set_viewport_size = AsyncMock()
    page.screenshot = AsyncMock(return_value=b"\x89PNG fake image")

    async def wait_for_selector(selector, **kwargs):
        if not snapshots.get(selector):
            raise PlaywrightTimeoutError(f"Timeout waiting for {selector}")

    page.wait_for_selector = AsyncMock(side_effect=wait_for_selector)
    page.eval_on_selector_all = AsyncMock(
        side_effect=lambda selector, script, arg: snapshots.get(selector, [])
    )

    if table_grid is None:
        page.query_selector = AsyncMock(return_value=None)
    else:
        table = MagicMock()
        table.evaluate = AsyncMock(return_value=table_grid)
        page.query_selector = AsyncMock(return_value=table)
    return page


class FakeSessionFactory:
    """Stands in for ``browser_session``; counts acquisitions and releases."""

    def __init__(self, page=None, launch_failures: int = 0):
        self.page = page if page is not None else make_page()
        self.launch_failures = launch_failures
        self.acquired = 0
        self.released = 0
        self.sessions: List[BrowserSession] = []

    @asynccontextmanager
    async def __call__(self, options):
        self.acquired += 1
        if self.acquired <= self.launch_failures:
            from webunlock.errors import LaunchError
            raise LaunchError("browser failed to start")
        session = BrowserSession(playwright=None, browser=None, context=None, page=self.page)
        self.sessions.append(session)
        try:
            yield session
        finally:
            self.released += 1


class RecordingSleep:
    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float):
        self.delays.append(seconds)


@pytest.fixture
def fake_session():
    page = make_page()
    return BrowserSession(playwright=None, browser=None, context=None, page=page)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
async def async_client():
    """Async HTTP client bound to the FastAPI app."""
    from httpx import ASGITransport, AsyncClient
    from webunlock.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
