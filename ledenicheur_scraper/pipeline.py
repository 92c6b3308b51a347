"""
Pipeline driver: one product name in, one ``ProductDetails`` (or None) out.

    search -> select -> product page -> specifications -> price history
                                                       -> images

Each lookup opens its own browser session and closes it whatever happens.
Stages that find nothing yield None and the driver merges what is left;
only ``BotChallengeError`` escapes to the caller.
"""

from dataclasses import replace
from typing import AsyncContextManager, Awaitable, Callable, Optional, TypeVar
import logging

from playwright.async_api import Error as PlaywrightError, Page

from .browser import browser_session, goto, is_visible_within
from .captcha import check_page
from .config import Config
from .consent import dismiss_consent
from .images import extract_image_urls
from .models import PriceHistorySummary, ProductDetails, ScoredCandidate
from .price_history import extract_price_history
from .search import find_best_candidate, search_candidates
from .site_selectors import PRODUCT_INFO_WRAPPERS
from .specifications import extract_specifications

logger = logging.getLogger(__name__)

T = TypeVar("T")
SessionFactory = Callable[[Config], AsyncContextManager[Page]]


async def _guarded(stage: str, step: Awaitable[T], default: T) -> T:
    try:
        return await step
    except PlaywrightError as e:
        logger.warning(f"{stage} failed: {e}")
        return default


def merge_stages(url: str, details: Optional[ProductDetails],
                 price_history: Optional[PriceHistorySummary],
                 image_urls: list[str]) -> Optional[ProductDetails]:
    """Combine the independent stage results into one record.

    A page with neither a datasheet nor a price history gives None; either
    one alone is enough for a record.
    """
    if details is None and price_history is None:
        return None
    if details is None:
        details = ProductDetails(url=url)
    return replace(details, image_urls=list(image_urls),
                   price_history=price_history)


class LedenicheurScraper:
    """Looks products up on ledenicheur.fr.

    ``session_factory`` yields a ready page for a config; it defaults to a
    real Chromium session and is replaced by a fake page in tests.
    """

    def __init__(self, config: Optional[Config] = None,
                 session_factory: SessionFactory = browser_session):
        self.config = config or Config.production()
        self._session = session_factory

    async def scrape(self, product_name: str) -> Optional[ProductDetails]:
        """Search, pick the best match and extract its product page."""
        async with self._session(self.config) as page:
            best = await find_best_candidate(page, product_name, self.config)
            if best is None:
                return None
            return await self._scrape_product_page(page, best.page_url)

    async def search_candidates(self, product_name: str) -> list[ScoredCandidate]:
        """Every result of the search page, scored, best first, unfiltered."""
        async with self._session(self.config) as page:
            return await search_candidates(page, product_name, self.config)

    async def scrape_url(self, url: str) -> Optional[ProductDetails]:
        """Extract a product page chosen beforehand."""
        async with self._session(self.config) as page:
            return await self._scrape_product_page(page, url)

    async def _scrape_product_page(self, page: Page,
                                   url: str) -> Optional[ProductDetails]:
        logger.info(f"Product page: {url}")
        if not await goto(page, url, self.config):
            return None

        await dismiss_consent(page, "product page", self.config)
        await check_page(page)

        info = page.locator(", ".join(PRODUCT_INFO_WRAPPERS)).first
        if not await is_visible_within(info, self.config.timeouts.selector_ms):
            logger.warning(f"'Info produit' not visible on {url}, "
                           "extracting whatever is there")

        details = await _guarded(
            "Specifications", extract_specifications(page), None)
        price_history = await _guarded(
            "Price history", extract_price_history(page, self.config), None)
        image_urls = await _guarded(
            "Images", extract_image_urls(page, self.config), [])

        result = merge_stages(page.url or url, details, price_history,
                              image_urls)
        if result is None:
            logger.warning(f"Nothing usable extracted from {url}")
        return result
