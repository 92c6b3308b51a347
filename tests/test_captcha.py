import pytest
from bs4 import BeautifulSoup

from ledenicheur_scraper.captcha import (
    check_page,
    detect_bot_challenge,
    ensure_no_bot_challenge,
)
from ledenicheur_scraper.errors import BotChallengeError, ScraperError

from fakes import FakePage
from pages import CAPTCHA_PAGE, SEARCH_PAGE


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


@pytest.mark.parametrize("html, kind", [
    (CAPTCHA_PAGE, "captcha-form"),
    ('<div class="g-recaptcha" data-sitekey="k"></div>', "recaptcha"),
    ('<iframe src="https://newassets.hcaptcha.com/captcha/v1"></iframe>',
     "hcaptcha"),
    ('<div class="cf-turnstile"></div>', "turnstile"),
    ('<iframe src="https://geo.captcha-delivery.com/captcha/?x=1"></iframe>',
     "datadome"),
])
def test_detect_bot_challenge(html, kind):
    assert detect_bot_challenge(_soup(html)) == kind


def test_regular_page_is_not_a_challenge():
    assert detect_bot_challenge(_soup(SEARCH_PAGE)) is None
    ensure_no_bot_challenge(_soup(SEARCH_PAGE), "https://ledenicheur.fr/")


def test_challenge_is_a_scraper_error():
    with pytest.raises(ScraperError):
        ensure_no_bot_challenge(_soup(CAPTCHA_PAGE), "https://ledenicheur.fr/")


@pytest.mark.asyncio
async def test_check_page_returns_snapshot():
    url = "https://ledenicheur.fr/search?query=x"
    page = FakePage({url: SEARCH_PAGE})
    await page.goto(url)
    soup = await check_page(page)
    assert soup.select_one('ul[data-test="SearchResultList"]') is not None


@pytest.mark.asyncio
async def test_check_page_raises_with_url():
    url = "https://ledenicheur.fr/product.php?p=1"
    page = FakePage({url: CAPTCHA_PAGE})
    await page.goto(url)
    with pytest.raises(BotChallengeError) as exc:
        await check_page(page)
    assert exc.value.url == url
