"""
Search orchestration: run the site search, read the result cards and pick
the listing that best matches the merchant's product name.
"""

from typing import Optional
from urllib.parse import quote, urljoin
import logging

from bs4 import BeautifulSoup, Tag
from playwright.async_api import Page

from .browser import BH, goto, is_visible_within
from .captcha import check_page
from .cascade import first_non_empty
from .config import Config
from .consent import dismiss_consent
from .models import ScoredCandidate, SearchCandidate
from .similarity import rank_candidates, select_best
from .site_selectors import (
    SEARCH_CARD,
    SEARCH_CARD_IMAGE,
    SEARCH_CARD_LINKS,
    SEARCH_CARD_PRICE,
    SEARCH_CARD_TITLES,
    SEARCH_RESULT_ITEM,
    SEARCH_RESULT_LIST,
)
from .text import clean_text

logger = logging.getLogger(__name__)


def build_search_url(product_name: str, config: Config) -> str:
    return config.search_url_prefix + quote(product_name.strip())


# ============================================================================
# RESULT CARDS
# ============================================================================

def _select_text(node: Tag, selector: str) -> str:
    el = node.select_one(selector)
    return clean_text(el.get_text(" ")) if el else ""


def _card_title(card: Tag, link: Tag) -> str:
    return first_non_empty(
        [lambda sel=sel: _select_text(card, sel) for sel in SEARCH_CARD_TITLES]
        + [lambda: clean_text(link.get_text(" ")),
           lambda: clean_text(link.get("aria-label") or link.get("title"))]
    ) or ""


def _card_link(card: Tag) -> Optional[Tag]:
    for sel in SEARCH_CARD_LINKS:
        link = card.select_one(sel)
        if link is not None and link.get("href"):
            return link
    return None


def parse_search_results(soup: BeautifulSoup,
                         base_url: str) -> list[SearchCandidate]:
    """Candidates of the first result page, in display order."""
    container = soup.select_one(SEARCH_RESULT_LIST)
    if container is None:
        return []

    results = []
    for item in container.select(SEARCH_RESULT_ITEM):
        card = item.select_one(SEARCH_CARD) or item
        link = _card_link(card)
        if link is None:
            continue
        title = _card_title(card, link)
        if not title:
            continue
        image = card.select_one(SEARCH_CARD_IMAGE)
        results.append(SearchCandidate(
            title=title,
            page_url=urljoin(base_url, link["href"]),
            price_text=_select_text(card, SEARCH_CARD_PRICE) or None,
            image_url=(urljoin(base_url, image["src"])
                       if image is not None and image.get("src") else None),
        ))
    return results


# ============================================================================
# ORCHESTRATION
# ============================================================================

async def search_candidates(page: Page, product_name: str,
                            config: Config) -> list[ScoredCandidate]:
    """Open the search page and return every result, scored, best first.

    An empty list means "no results"; a result list that never shows up
    is treated the same way.
    """
    url = build_search_url(product_name, config)
    logger.info(f"Searching: {product_name!r} ({url})")
    if not await goto(page, url, config):
        return []

    await dismiss_consent(page, "search page", config)
    await check_page(page)
    await BH.short_delay(config)

    results_list = page.locator(SEARCH_RESULT_LIST).first
    if not await is_visible_within(results_list, config.timeouts.selector_ms):
        logger.warning(f"Result list not visible for {product_name!r}")
        return []

    soup = await check_page(page)
    candidates = parse_search_results(soup, config.base_url)
    logger.info(f"{len(candidates)} results on the search page")

    ranked = rank_candidates(product_name, candidates)
    for sc in ranked[:5]:
        logger.info(f"  {sc.similarity:.4f}  {sc.title}  {sc.page_url}")
    return ranked


async def find_best_candidate(page: Page, product_name: str,
                              config: Config) -> Optional[ScoredCandidate]:
    ranked = await search_candidates(page, product_name, config)
    best = select_best(ranked, config.similarity_threshold)
    if best is None:
        logger.warning(f"No product found for: {product_name!r}")
        return None
    logger.info(f"Best match: {best.title!r} (similarity={best.similarity:.4f})")
    return best


async def find_best_candidate_url(page: Page, product_name: str,
                                  config: Config) -> Optional[str]:
    best = await find_best_candidate(page, product_name, config)
    return best.page_url if best else None
