"""
Price-history summary from the "Statistiques" tab.

The panel only renders after the tab is clicked, and its footer shows
figures for the selected period, so the extractor drives the UI first
(tab, then "3 mois") and reads the four footer fields afterwards.
"""

from typing import Optional
import logging

from playwright.async_api import Error as PlaywrightError, Locator, Page

from .browser import BH, click_first_visible, first_text, first_visible
from .config import Config
from .models import PriceHistorySummary
from .site_selectors import (
    ACTIVE_PERIOD_CLASS,
    LOWEST_PRICE_DATE,
    LOWEST_PRICE_IN_PERIOD,
    LOWEST_PRICE_TODAY,
    LOWEST_PRICE_TODAY_SHOP,
    PERIOD_BUTTONS,
    PERIOD_LABEL,
    PRICE_HISTORY_PANELS,
    STATISTICS_TABS,
)
from .text import format_price, parse_number

logger = logging.getLogger(__name__)


def median_estimate(lowest_in_period: Optional[str],
                    lowest_today: Optional[str]) -> Optional[str]:
    """Midpoint of the two displayed prices.

    Only two figures are shown on the page, so this is the mean of those two,
    not a median over the series. With one parsable price, that price is
    returned; with none, None.
    """
    prices = [p for p in (parse_number(lowest_in_period),
                          parse_number(lowest_today)) if p is not None]
    if not prices:
        return None
    return format_price(sum(prices) / len(prices))


async def _open_statistics_tab(page: Page, config: Config):
    clicked = await click_first_visible(page, STATISTICS_TABS,
                                        config.timeouts.probe_ms)
    if clicked:
        logger.info(f"Statistics tab opened ({clicked})")
        await page.wait_for_timeout(config.timeouts.settle_ms)
    else:
        logger.debug("No statistics tab, the panel may already be shown")


async def _is_active(button: Locator) -> bool:
    if ACTIVE_PERIOD_CLASS in (await button.get_attribute("class") or ""):
        return True
    for attr in ("aria-pressed", "aria-selected"):
        if await button.get_attribute(attr) == "true":
            return True
    return False


async def _select_period(panel: Locator, page: Page, config: Config):
    try:
        button = await first_visible(panel, PERIOD_BUTTONS,
                                     config.timeouts.probe_ms)
        if button is None:
            logger.debug(f"No '{PERIOD_LABEL}' control")
            return
        if await _is_active(button):
            return
        await button.click(timeout=config.timeouts.short_selector_ms)
        logger.info(f"Period '{PERIOD_LABEL}' selected")
        await page.wait_for_timeout(config.timeouts.settle_ms)
    except PlaywrightError as e:
        logger.debug(f"Period selection failed: {e}")


async def _read_summary(panel: Locator, config: Config) -> PriceHistorySummary:
    t = config.timeouts.probe_ms
    in_period = await first_text(panel, LOWEST_PRICE_IN_PERIOD, t)
    date = await first_text(panel, LOWEST_PRICE_DATE, t)
    today = await first_text(panel, LOWEST_PRICE_TODAY, t)
    shop = await first_text(panel, LOWEST_PRICE_TODAY_SHOP, t)
    return PriceHistorySummary(
        lowest_price_in_period=in_period,
        lowest_price_date=date,
        lowest_price_today=today,
        lowest_price_today_shop=shop,
        median_price_estimate=median_estimate(in_period, today),
        selected_period=PERIOD_LABEL,
    )


async def extract_price_history(page: Page,
                                config: Config) -> Optional[PriceHistorySummary]:
    """Best-effort; returns None rather than raising."""
    try:
        await _open_statistics_tab(page, config)

        panel = await first_visible(page, PRICE_HISTORY_PANELS,
                                    config.timeouts.short_selector_ms)
        if panel is None:
            logger.warning(f"Price-history panel not found on {page.url}")
            return None

        await _select_period(panel, page, config)
        await BH.short_delay(config)
        summary = await _read_summary(panel, config)
    except PlaywrightError as e:
        logger.warning(f"Price-history extraction failed: {e}")
        return None

    if not summary.has_data():
        logger.warning("Price-history panel found but no figure could be read")
        return None
    logger.info(f"Price history: {summary}")
    return summary
