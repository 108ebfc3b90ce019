import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from .config import SETTLE_DELAY_MS, get_settings
from .errors import LaunchError, NavigationError, NavigationTimeoutError
from .models import ScrapeOptions

logger = logging.getLogger(__name__)


@dataclass
class BrowserSession:
    """One isolated browser process with a single page, owned by one attempt."""
    playwright: Any
    browser: Any
    context: Any
    page: Any


async def acquire(options: ScrapeOptions) -> BrowserSession:
    """Launch a headless browser and open a page configured from ``options``.

    Anything already started is torn down before the ``LaunchError`` propagates.
    """
    settings = get_settings()
    playwright = browser = context = None
    try:
        playwright = await async_playwright().start()
        browser = await playwright.chromium.launch(
            headless=settings.headless,
            args=settings.browser_args,
        )

        context_kwargs = {
            "java_script_enabled": True,
            "accept_downloads": False,
            "ignore_https_errors": True,
        }
        if options.user_agent:
            context_kwargs["user_agent"] = options.user_agent
        if options.viewport:
            context_kwargs["viewport"] = options.viewport.model_dump()
        context = await browser.new_context(**context_kwargs)
        page = await context.new_page()
    except Exception as e:
        await release(BrowserSession(playwright, browser, context, None))
        raise LaunchError(f"Failed to launch browser: {str(e)}") from e

    return BrowserSession(playwright=playwright, browser=browser, context=context, page=page)


async def release(session: BrowserSession) -> None:
    """Tear the session down. Failures are logged and never propagated."""
    steps = [
        ("page", session.page, "close"),
        ("context", session.context, "close"),
        ("browser", session.browser, "close"),
        ("playwright", session.playwright, "stop"),
    ]
    for name, resource, method in steps:
        if resource is None:
            continue
        try:
            await getattr(resource, method)()
        except Exception as e:
            logger.warning(f"Failed to close {name}: {str(e)}")


@asynccontextmanager
async def browser_session(options: ScrapeOptions) -> AsyncIterator[BrowserSession]:
    session = await acquire(options)
    try:
        yield session
    finally:
        await release(session)


async def navigate(page, url: str, options: ScrapeOptions, settle: Optional[int] = SETTLE_DELAY_MS) -> None:
    """Load ``url`` and wait for the requested completeness criterion.

    After loading, waits ``settle`` milliseconds so scripts can render content.
    """
    logger.info(f"Navigating to {url} (waitUntil={options.wait_until.value}, timeout={options.timeout}ms)")
    try:
        await page.goto(url, wait_until=options.wait_until.value, timeout=options.timeout)
    except PlaywrightTimeoutError as e:
        raise NavigationTimeoutError(
            f"Navigation to {url} timed out after {options.timeout}ms"
        ) from e
    except PlaywrightError as e:
        raise NavigationError(f"Navigation to {url} failed: {e.message}") from e

    if settle:
        await page.wait_for_timeout(settle)
