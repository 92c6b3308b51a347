"""
Product pictures.

Strategies, in order, until one yields something:
  0. CDN product images already present in the page
  1. the lightbox opened from the media button
  2. the visible carousel
  3. thumbnails
Every URL is upgraded to the 800px variant, made absolute and de-duplicated.
"""

from functools import partial
from typing import Iterable, Optional
from urllib.parse import urljoin
import logging
import re

from bs4 import BeautifulSoup
from playwright.async_api import Error as PlaywrightError, Locator, Page

from .browser import click_first_visible, first_visible, is_visible_within
from .cascade import first_result
from .config import IMAGE_HOST, Config
from .site_selectors import (
    CAROUSEL_CONTAINERS,
    LIGHTBOX_CLOSE_BUTTONS,
    LIGHTBOX_CONTAINERS,
    LIGHTBOX_IMAGES,
    MEDIA_BUTTONS,
    MODAL_OVERLAY,
    THUMBNAIL_IMAGES,
)

logger = logging.getLogger(__name__)

_SIZE_SEGMENT_RE = re.compile(r"/(280|thumb|thumbnail)/")


def full_size_url(src: str, base_url: str) -> str:
    return urljoin(base_url, _SIZE_SEGMENT_RE.sub("/800/", src.strip()))


def normalize_image_urls(srcs: Iterable[Optional[str]],
                         base_url: str) -> list[str]:
    """800px, absolute, CDN-only, first occurrence kept."""
    seen = []
    for src in srcs:
        if not src or not src.strip():
            continue
        url = full_size_url(src, base_url)
        if IMAGE_HOST in url and url not in seen:
            seen.append(url)
    return seen


async def _srcs(locator: Locator) -> list[str]:
    srcs = []
    for img in await locator.all():
        src = await img.get_attribute("src")
        if src:
            srcs.append(src)
    return srcs


# ============================================================================
# STRATEGIES
# ============================================================================

async def _from_page(page: Page, config: Config) -> list[str]:
    soup = BeautifulSoup(await page.content(), "html.parser")
    return [img["src"] for img in soup.select(f'img[src*="{IMAGE_HOST}"]')
            if "/product/" in img["src"]]


async def _dismiss_overlay(page: Page, config: Config):
    overlay = page.locator(MODAL_OVERLAY).first
    if not await is_visible_within(overlay, config.timeouts.probe_ms):
        return
    logger.info("Modal overlay in the way, closing it")
    await page.keyboard.press("Escape")
    if await is_visible_within(overlay, config.timeouts.probe_ms):
        await click_first_visible(overlay, LIGHTBOX_CLOSE_BUTTONS,
                                  config.timeouts.probe_ms)


async def _from_lightbox(page: Page, config: Config) -> list[str]:
    t = config.timeouts
    button = await first_visible(page, MEDIA_BUTTONS, t.probe_ms)
    if button is None:
        logger.debug("No media button")
        return []

    await _dismiss_overlay(page, config)
    await button.click(timeout=t.short_selector_ms)
    await page.wait_for_timeout(t.settle_ms)

    lightbox = await first_visible(page, LIGHTBOX_CONTAINERS,
                                   t.short_selector_ms)
    if lightbox is None:
        logger.warning("Lightbox not visible after clicking the media button")
        return []

    srcs = await first_result(
        partial(_srcs, lightbox.locator(sel)) for sel in LIGHTBOX_IMAGES)

    if not await click_first_visible(lightbox, LIGHTBOX_CLOSE_BUTTONS,
                                     t.probe_ms):
        await page.keyboard.press("Escape")
    return srcs or []


async def _from_carousel(page: Page, config: Config) -> list[str]:
    carousel = await first_visible(page, CAROUSEL_CONTAINERS,
                                   config.timeouts.probe_ms)
    if carousel is None:
        return []
    return await _srcs(carousel.locator(f'img[src*="{IMAGE_HOST}"]'))


async def _from_thumbnails(page: Page, config: Config) -> list[str]:
    return await first_result(
        partial(_srcs, page.locator(sel)) for sel in THUMBNAIL_IMAGES) or []


STRATEGIES = [_from_page, _from_lightbox, _from_carousel, _from_thumbnails]


async def extract_image_urls(page: Page, config: Config) -> list[str]:
    """Full-size product image URLs; empty when nothing was found."""
    for strategy in STRATEGIES:
        try:
            urls = normalize_image_urls(await strategy(page, config),
                                        config.base_url)
        except PlaywrightError as e:
            logger.warning(f"Image strategy {strategy.__name__} failed: {e}")
            continue
        if urls:
            logger.info(f"{len(urls)} images found ({strategy.__name__})")
            return urls
    logger.warning(f"No image found on {page.url}")
    return []
