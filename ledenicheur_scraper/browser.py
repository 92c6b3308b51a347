"""
Browser session and the small Playwright helpers every stage relies on.
"""

from contextlib import asynccontextmanager
from functools import partial
from typing import AsyncIterator, Optional, Sequence
import asyncio
import logging
import random

from playwright.async_api import (
    Error as PlaywrightError,
    Locator,
    Page,
    Route,
    async_playwright,
)

from .cascade import first_result
from .config import (
    BLOCKED_DOMAINS,
    BLOCKED_RESOURCE_TYPES,
    IMAGE_HOST,
    LAUNCH_ARGS,
    Config,
    random_user_agent,
)
from .text import clean_text

# Optional: stealth patches make the consent/captcha walls show up less often
try:
    from playwright_stealth import Stealth
    HAS_STEALTH = True
except ImportError:
    HAS_STEALTH = False

logger = logging.getLogger(__name__)


# ============================================================================
# DELAYS
# ============================================================================

class BH:
    @staticmethod
    async def pause(min_ms: int, max_ms: int):
        if max_ms <= 0:
            return
        await asyncio.sleep(random.uniform(min_ms, max_ms) / 1000)

    @staticmethod
    async def short_delay(config: Config):
        await BH.pause(config.short_delay_min_ms, config.short_delay_max_ms)

    @staticmethod
    async def post_action_delay(config: Config):
        await BH.pause(config.post_action_delay_min_ms,
                       config.post_action_delay_max_ms)


# ============================================================================
# LOCATOR CASCADES
# ============================================================================

async def is_visible_within(locator: Locator, timeout_ms: int) -> bool:
    try:
        await locator.wait_for(state="visible", timeout=timeout_ms)
        return True
    except PlaywrightError:
        return False


async def _visible(scope, selector: str, timeout_ms: int) -> Optional[Locator]:
    locator = scope.locator(selector).first
    if await is_visible_within(locator, timeout_ms):
        return locator
    logger.debug(f"Not visible: {selector}")
    return None


async def _visible_text(scope, selector: str, timeout_ms: int) -> Optional[str]:
    locator = await _visible(scope, selector, timeout_ms)
    if locator is None:
        return None
    try:
        return clean_text(await locator.text_content(timeout=timeout_ms))
    except PlaywrightError as e:
        logger.debug(f"Text read failed for {selector}: {e}")
        return None


async def first_visible(scope, selectors: Sequence[str],
                        timeout_ms: int) -> Optional[Locator]:
    """First element, over ``selectors`` in order, that becomes visible."""
    return await first_result(
        partial(_visible, scope, sel, timeout_ms) for sel in selectors)


async def first_text(scope, selectors: Sequence[str],
                     timeout_ms: int) -> Optional[str]:
    """Text of the first visible, non-empty element over ``selectors``."""
    return await first_result(
        partial(_visible_text, scope, sel, timeout_ms) for sel in selectors)


async def click_first_visible(scope, selectors: Sequence[str],
                              timeout_ms: int) -> Optional[str]:
    """Click the first visible match; return the selector that worked."""
    for sel in selectors:
        locator = await _visible(scope, sel, timeout_ms)
        if locator is None:
            continue
        try:
            await locator.click(timeout=timeout_ms)
            return sel
        except PlaywrightError as e:
            logger.debug(f"Click failed on {sel}: {e}")
    return None


async def goto(page: Page, url: str, config: Config) -> bool:
    """Navigate and wait for the DOM; a timeout counts as a missing page."""
    try:
        await page.goto(url, wait_until="domcontentloaded",
                        timeout=config.timeouts.navigation_ms)
        return True
    except PlaywrightError as e:
        logger.warning(f"Navigation to {url} failed: {e}")
        return False


# ============================================================================
# SESSION
# ============================================================================

async def apply_stealth(page: Page):
    if HAS_STEALTH:
        await Stealth().apply_stealth_async(page)
        logger.info("Stealth patches applied")


async def _filter_request(route: Route):
    request = route.request
    url = request.url
    if (request.resource_type in BLOCKED_RESOURCE_TYPES
            or any(d in url for d in BLOCKED_DOMAINS)):
        await route.abort()
    elif request.resource_type == "image" and IMAGE_HOST not in url:
        await route.abort()
    else:
        await route.continue_()


async def _close_popup(popup: Page):
    await popup.close()


@asynccontextmanager
async def browser_session(config: Config) -> AsyncIterator[Page]:
    """Launch Chromium, yield one prepared page, always close the browser."""
    async with async_playwright() as p:
        browser = await p.chromium.launch(
            headless=config.headless,
            slow_mo=config.slow_mo_ms,
            args=LAUNCH_ARGS,
            ignore_default_args=["--enable-automation"])
        try:
            ctx = await browser.new_context(
                viewport={"width": config.viewport_width,
                          "height": config.viewport_height},
                user_agent=random_user_agent(),
                locale=config.locale,
                ignore_https_errors=True,
                accept_downloads=False)
            page = await ctx.new_page()
            await apply_stealth(page)
            if config.block_resources:
                await page.route("**/*", _filter_request)
            page.on("popup", _close_popup)
            page.set_default_timeout(config.timeouts.selector_ms)
            page.set_default_navigation_timeout(config.timeouts.navigation_ms)
            yield page
        finally:
            await browser.close()
            logger.debug("Browser closed")
