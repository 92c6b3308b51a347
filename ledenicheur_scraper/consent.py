"""
Cookie-consent banners.

The banner covers the page and swallows clicks, so it is dismissed after
every navigation and before anything else is touched. Failing to find one
is normal: the site does not always show it.
"""

import logging

from playwright.async_api import Error as PlaywrightError, Page

from .browser import BH, click_first_visible, is_visible_within
from .config import Config
from .site_selectors import (
    CONSENT_BUTTONS,
    CONSENT_FRAME_BUTTONS,
    CONSENT_FRAMES,
    CONSENT_VENDOR_BUTTON,
    CONSENT_WRAPPER,
    CONSENT_WRAPPER_ACCEPT,
)

logger = logging.getLogger(__name__)


async def _accept_in_wrapper(page: Page, config: Config) -> bool:
    timeout = config.timeouts.consent_ms
    wrapper = page.locator(CONSENT_WRAPPER).first
    if await is_visible_within(wrapper, timeout):
        button = wrapper.locator(CONSENT_WRAPPER_ACCEPT).first
        if await is_visible_within(button, timeout):
            await button.click(timeout=timeout)
            return True
    return bool(await click_first_visible(page, CONSENT_BUTTONS, timeout))


async def _accept_vendor(page: Page, config: Config) -> bool:
    timeout = config.timeouts.consent_ms
    # Usercentrics renders into an open shadow root, which CSS locators pierce
    button = page.locator(CONSENT_VENDOR_BUTTON).first
    if await is_visible_within(button, timeout):
        await button.click(timeout=timeout)
        return True

    for frame_sel in CONSENT_FRAMES:
        if await page.locator(frame_sel).count() == 0:
            continue
        frame = page.frame_locator(frame_sel).first
        if await click_first_visible(frame, CONSENT_FRAME_BUTTONS, timeout):
            return True
    return False


async def dismiss_consent(page: Page, label: str, config: Config) -> bool:
    """Best-effort: click an "accept" control if a banner is showing.

    Never raises; returns True when something was clicked.
    """
    for strategy in (_accept_in_wrapper, _accept_vendor):
        try:
            if await strategy(page, config):
                logger.info(f"Cookies accepted on {label}")
                await BH.post_action_delay(config)
                return True
        except PlaywrightError as e:
            logger.debug(f"Consent strategy {strategy.__name__} failed "
                         f"on {label}: {e}")
    logger.debug(f"No cookie banner handled on {label}")
    return False
