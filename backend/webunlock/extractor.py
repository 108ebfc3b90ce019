import logging
from typing import Any, Dict, Iterable, List, Optional

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .config import SELECTOR_WAIT_TIMEOUT_MS
from .models import ElementRecord, ExtractionResult, ScrapeOptions
from .session import BrowserSession, navigate

logger = logging.getLogger(__name__)

COMMON_ATTRIBUTES = ["href", "src", "alt", "class", "id", "title"]

# Runs in the page for every element matched by a selector. Only raw values
# come back; normalization happens in Python.
ELEMENT_SNAPSHOT_SCRIPT = """
(elements, commonAttributes) => elements.map(el => {
    const attributes = {};
    for (const name of commonAttributes) {
        const value = el.getAttribute(name);
        if (value !== null) attributes[name] = value;
    }
    for (const attr of Array.from(el.attributes)) {
        if (attr.name.startsWith('data-')) attributes[attr.name] = attr.value;
    }
    return {
        innerText: typeof el.innerText === 'string' ? el.innerText : null,
        textContent: el.textContent,
        value: typeof el.value === 'string' ? el.value : null,
        attributes: attributes
    };
})
"""


def normalize_text(value: Optional[str]) -> Optional[str]:
    """Collapse runs of whitespace and trim. Returns None when nothing is left."""
    if value is None:
        return None
    collapsed = " ".join(value.split())
    return collapsed or None


def build_record(snapshot: Dict[str, Any]) -> ElementRecord:
    """Turn a raw element snapshot into an ElementRecord.

    Text priority is rendered text, then text content, then form value.
    Attributes present with an empty value are kept; only an empty map
    becomes None.
    """
    text = None
    for key in ("innerText", "textContent", "value"):
        text = normalize_text(snapshot.get(key))
        if text is not None:
            break

    attributes = {
        name: value
        for name, value in (snapshot.get("attributes") or {}).items()
        if isinstance(value, str)
    }
    return ElementRecord(text=text, attributes=attributes or None)


def unique_selectors(selectors: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(selectors))


async def query_selector(page, selector: str) -> List[ElementRecord]:
    try:
        await page.wait_for_selector(selector, state="attached", timeout=SELECTOR_WAIT_TIMEOUT_MS)
    except PlaywrightTimeoutError:
        # Querying anyway: slow content may still be there
        logger.debug(f"No match for {selector!r} within {SELECTOR_WAIT_TIMEOUT_MS}ms")

    snapshots = await page.eval_on_selector_all(selector, ELEMENT_SNAPSHOT_SCRIPT, COMMON_ATTRIBUTES)
    return [build_record(snapshot) for snapshot in snapshots]


async def extract(session: BrowserSession, url: str, selectors: List[str], options: ScrapeOptions) -> ExtractionResult:
    """Navigate to ``url`` and extract every element matched by each selector.

    Every selector appears in the result, in first-seen order, even when it
    matched nothing.
    """
    page = session.page
    await navigate(page, url, options)

    result: ExtractionResult = {}
    for selector in unique_selectors(selectors):
        result[selector] = await query_selector(page, selector)
        logger.info(f"Selector {selector!r} matched {len(result[selector])} elements")
    return result
