"""
Bot-challenge detection.

A challenge page is never scraped: whatever it contains is not the product,
so detection raises instead of returning a partial result.
"""

from typing import Optional
import logging

from bs4 import BeautifulSoup
from playwright.async_api import Page

from .errors import BotChallengeError
from .site_selectors import BOT_CHALLENGE_MARKERS

logger = logging.getLogger(__name__)


def detect_bot_challenge(soup: BeautifulSoup) -> Optional[str]:
    """Return the challenge kind found in the document, or None."""
    for kind, selectors in BOT_CHALLENGE_MARKERS.items():
        for sel in selectors:
            if soup.select_one(sel) is not None:
                return kind
    return None


def ensure_no_bot_challenge(soup: BeautifulSoup, url: str):
    kind = detect_bot_challenge(soup)
    if kind:
        logger.error(f"CAPTCHA detected ({kind}) on page: {url}")
        raise BotChallengeError(url, kind)


async def check_page(page: Page) -> BeautifulSoup:
    """Snapshot the page, raise on a challenge, return the parsed snapshot."""
    soup = BeautifulSoup(await page.content(), "html.parser")
    ensure_no_bot_challenge(soup, page.url)
    return soup
