"""End-to-end scenarios for the pipeline driver, against fake pages."""

import pytest

from ledenicheur_scraper.errors import BotChallengeError
from ledenicheur_scraper.models import (
    PriceHistorySummary,
    ProductDetails,
    Specification,
)
from ledenicheur_scraper.pipeline import LedenicheurScraper, merge_stages
from ledenicheur_scraper.search import build_search_url

from fakes import FakePage, session_for
from pages import (
    CAPTCHA_PAGE,
    HIDDEN_RESULTS_PAGE,
    MEDIA,
    PRODUCT_URL,
    SEARCH_PAGE,
    SPECIFICATIONS,
    STATISTICS,
    TODAY_ONLY_STATISTICS,
    product_page,
)

QUERY = "Apple MacBook Pro M2"


def _scraper(config, page: FakePage) -> LedenicheurScraper:
    return LedenicheurScraper(config, session_factory=session_for(page))


def _site(config, product_html: str, search_html: str = SEARCH_PAGE,
          **on_click) -> FakePage:
    return FakePage({
        build_search_url(QUERY, config): search_html,
        PRODUCT_URL: product_html,
    }, on_click=on_click)


def _show_statistics(page: FakePage):
    page.show('section[data-test="StatisticsTabContent"]')


class TestScrape:
    @pytest.mark.asyncio
    async def test_full_lookup(self, config):
        page = _site(config, product_page(MEDIA, SPECIFICATIONS, STATISTICS),
                     **{"stats-tab": _show_statistics})

        details = await _scraper(config, page).scrape(QUERY)

        assert page.visited == [build_search_url(QUERY, config), PRODUCT_URL]
        assert details.url == PRODUCT_URL
        assert details.page_title == 'Apple MacBook Pro 13" M2 8GB 256GB'
        assert details.section_title == "Info produit"
        assert len(details.specifications) == 5
        assert details.image_urls == [
            "https://pricespy-75b8.kxcdn.com/product/standard/800/2002.jpg"]
        assert details.price_history.median_price_estimate == "1330,83 €"
        assert page.closed

    @pytest.mark.asyncio
    async def test_no_match(self, config):
        page = _site(config, product_page(SPECIFICATIONS),
                     search_html=HIDDEN_RESULTS_PAGE)

        assert await _scraper(config, page).scrape(QUERY) is None
        assert PRODUCT_URL not in page.visited
        assert page.closed

    @pytest.mark.asyncio
    async def test_bot_challenge_on_product_page(self, config):
        page = _site(config, CAPTCHA_PAGE)

        with pytest.raises(BotChallengeError) as exc:
            await _scraper(config, page).scrape(QUERY)

        assert exc.value.url == PRODUCT_URL
        assert page.closed

    @pytest.mark.asyncio
    async def test_price_history_without_datasheet(self, config):
        page = _site(config, product_page(TODAY_ONLY_STATISTICS))

        details = await _scraper(config, page).scrape(QUERY)

        assert details.specifications == []
        assert details.price_history.lowest_price_today == "194,99 €"

    @pytest.mark.asyncio
    async def test_nothing_on_product_page(self, config):
        page = _site(config, product_page("<p>Page vide</p>", title=""))
        assert await _scraper(config, page).scrape(QUERY) is None


class TestOtherEntryPoints:
    @pytest.mark.asyncio
    async def test_search_candidates_are_not_filtered(self, config):
        strict = config.with_overrides(similarity_threshold=0.99)
        page = _site(strict, product_page(SPECIFICATIONS))

        ranked = await _scraper(strict, page).search_candidates(QUERY)

        assert len(ranked) == 2
        assert ranked[0].page_url == PRODUCT_URL
        assert page.closed

    @pytest.mark.asyncio
    async def test_scrape_url(self, config):
        page = _site(config, product_page(SPECIFICATIONS))

        details = await _scraper(config, page).scrape_url(PRODUCT_URL)

        assert page.visited == [PRODUCT_URL]
        assert len(details.specifications) == 5
        assert details.price_history is None

    @pytest.mark.asyncio
    async def test_scrape_url_unreachable(self, config):
        page = FakePage({})
        assert await _scraper(config, page).scrape_url(PRODUCT_URL) is None


class TestMergeStages:
    def test_nothing(self):
        assert merge_stages(PRODUCT_URL, None, None, []) is None

    def test_specifications_only(self):
        details = ProductDetails(
            url=PRODUCT_URL,
            specifications=[Specification("Écran", "Type", "OLED")])
        merged = merge_stages(PRODUCT_URL, details, None, ["img"])
        assert merged.specifications == details.specifications
        assert merged.image_urls == ["img"]
        assert merged.price_history is None

    def test_price_history_only(self):
        summary = PriceHistorySummary(lowest_price_today="10,00 €")
        merged = merge_stages(PRODUCT_URL, None, summary, [])
        assert merged == ProductDetails(url=PRODUCT_URL, price_history=summary)
