import base64
import logging
from dataclasses import dataclass
from typing import Optional

from .config import SCREENSHOT_VIEWPORT
from .models import ScrapeOptions, Viewport
from .session import BrowserSession, navigate

logger = logging.getLogger(__name__)


@dataclass
class Screenshot:
    data: str  # base64-encoded PNG
    mime_type: str = "image/png"
    encoding: str = "base64"

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};{self.encoding},{self.data}"


def resolve_viewport(viewport: Optional[Viewport]) -> Viewport:
    return viewport or Viewport(**SCREENSHOT_VIEWPORT)


async def capture(session: BrowserSession, url: str, options: ScrapeOptions) -> Screenshot:
    """Capture ``url`` as a PNG, the visible viewport or the whole document."""
    page = session.page
    viewport = resolve_viewport(options.viewport)
    await page.set_viewport_size(viewport.model_dump())

    await navigate(page, url, options)

    screenshot = await page.screenshot(full_page=options.full_page, type="png")
    screenshot_base64 = base64.b64encode(screenshot).decode("utf-8")
    logger.info(
        f"Captured {'full page' if options.full_page else 'viewport'} screenshot of {url} "
        f"({viewport.width}x{viewport.height}, {len(screenshot)} bytes)"
    )
    return Screenshot(data=screenshot_base64)
