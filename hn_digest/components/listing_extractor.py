"""
Listing extraction for the HN Digest pipeline.

The front page is rendered in headless Chromium and the resulting DOM is
mapped onto ListingRecord objects. Rendering failures never escape this
module: a broken page degrades to an empty listing.
"""

import logging
from typing import Any, AsyncContextManager, Callable, List, Optional

from bs4 import BeautifulSoup
from playwright.async_api import async_playwright

from ..interfaces import IPageRenderer
from ..models.config import DEFAULT_SOURCE_URL
from ..models.listing import ListingRecord
from ..utils.error_handling import (
    ErrorCategory,
    ErrorSeverity,
    ExtractionError,
    get_error_tracker,
)

logger = logging.getLogger(__name__)

ITEM_SELECTOR = ".athing"
TITLE_SELECTOR = ".titleline > a"
SCORE_SELECTOR = ".score"


def _text(element: Any) -> str:
    return element.get_text() if element is not None else ""


def parse_listing(html: str) -> List[ListingRecord]:
    """
    Map a rendered front page onto listing records.

    Each story spans two table rows: the ``.athing`` row holds the title
    link and the row right after it holds the score. A missing element
    leaves only that field empty.

    Args:
        html: Serialized DOM of the rendered page

    Returns:
        Records in page order, duplicates preserved
    """
    soup = BeautifulSoup(html or "", "html.parser")
    records = []

    for story in soup.select(ITEM_SELECTOR):
        title_element = story.select_one(TITLE_SELECTOR)
        subtext_row = story.find_next_sibling()
        score_element = (
            subtext_row.select_one(SCORE_SELECTOR) if subtext_row is not None else None
        )

        link = title_element.get("href") if title_element is not None else None
        records.append(
            ListingRecord(
                title=_text(title_element),
                link=link if isinstance(link, str) else "",
                score=_text(score_element),
            )
        )

    return records


class PlaywrightRenderer:
    """
    Headless Chromium session implementing IPageRenderer.

    Use as an async context manager; the browser is closed on exit even
    when navigation fails.
    """

    def __init__(self, headless: bool = True):
        self.headless = headless
        self._playwright = None
        self._browser = None
        self._page = None

    async def __aenter__(self) -> "PlaywrightRenderer":
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless
            )
            self._page = await self._browser.new_page()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def goto(self, url: str, timeout_ms: int) -> None:
        await self._page.goto(url, wait_until="networkidle", timeout=timeout_ms)

    async def content(self) -> str:
        return await self._page.content()

    async def close(self) -> None:
        """Tear down browser and driver; safe to call more than once."""
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            self._browser = None
            self._page = None
            if self._playwright is not None:
                playwright, self._playwright = self._playwright, None
                await playwright.stop()


# Each call opens a fresh browser session; entering it yields an IPageRenderer
RendererFactory = Callable[[], AsyncContextManager[IPageRenderer]]


class ListingExtractor:
    """Fetches the current front page as a list of ListingRecord."""

    def __init__(
        self,
        source_url: str = DEFAULT_SOURCE_URL,
        renderer_factory: Optional[RendererFactory] = None,
        navigation_timeout: float = 60.0,
    ):
        """
        Initialize listing extractor.

        Args:
            source_url: Page to render
            renderer_factory: Returns a fresh renderer context per call;
                defaults to a headless PlaywrightRenderer
            navigation_timeout: Seconds allowed for the page to go idle
        """
        self.source_url = source_url
        self.renderer_factory = renderer_factory or PlaywrightRenderer
        self.navigation_timeout = navigation_timeout

    async def _render(self) -> str:
        try:
            async with self.renderer_factory() as renderer:
                await renderer.goto(
                    self.source_url, timeout_ms=int(self.navigation_timeout * 1000)
                )
                return await renderer.content()
        except Exception as e:
            raise ExtractionError(f"Failed to render {self.source_url}: {e}") from e

    async def fetch_listing(self) -> List[ListingRecord]:
        """
        Render the source page and extract its records.

        Returns:
            Records in page order, or an empty list if rendering failed
        """
        try:
            html = await self._render()
        except ExtractionError as e:
            get_error_tracker().record_error(
                component="pipeline.extractor",
                category=ErrorCategory.EXTRACTION,
                severity=ErrorSeverity.MEDIUM,
                message=str(e),
                exception=e,
                context={"source_url": self.source_url},
            )
            logger.error(f"Error scraping {self.source_url}: {e}")
            return []

        records = parse_listing(html)
        logger.info(f"Extracted {len(records)} records from {self.source_url}")
        return records
