import pytest

from ledenicheur_scraper.consent import dismiss_consent

from fakes import FakePage

URL = "https://ledenicheur.fr/"


def _page(body: str, **on_click) -> FakePage:
    page = FakePage({URL: f"<html><body>{body}</body></html>"},
                    on_click=on_click)
    return page


class TestDismissConsent:
    @pytest.mark.asyncio
    async def test_cmp_wrapper(self, config):
        page = _page('<div class="cmp-wrapper"><button id="accept">OK</button></div>',
                     accept=lambda p: p.hide("div.cmp-wrapper"))
        await page.goto(URL)

        assert await dismiss_consent(page, "search page", config) is True
        assert page.clicked == ["accept"]
        assert page.soup.select_one("div.cmp-wrapper").has_attr("hidden")

    @pytest.mark.asyncio
    async def test_site_banner_button(self, config):
        page = _page('<div><button data-test="CookieBannerAcceptButton" '
                     'id="banner-ok">Tout accepter</button></div>')
        await page.goto(URL)

        assert await dismiss_consent(page, "product page", config) is True
        assert page.clicked == ["banner-ok"]

    @pytest.mark.asyncio
    async def test_usercentrics(self, config):
        page = _page('<div id="usercentrics-root">'
                     '<button data-testid="uc-accept-all-button" id="uc">OK</button>'
                     '</div>')
        await page.goto(URL)

        assert await dismiss_consent(page, "search page", config) is True
        assert page.clicked == ["uc"]

    @pytest.mark.asyncio
    async def test_no_banner(self, config):
        page = _page("<main>Rien</main>")
        await page.goto(URL)

        assert await dismiss_consent(page, "search page", config) is False
        assert page.clicked == []

    @pytest.mark.asyncio
    async def test_hidden_banner_is_ignored(self, config):
        page = _page('<div class="cmp-wrapper" hidden>'
                     '<button id="accept">OK</button></div>')
        await page.goto(URL)

        assert await dismiss_consent(page, "search page", config) is False

    @pytest.mark.asyncio
    async def test_consent_iframe_without_button(self, config):
        page = _page('<iframe id="sp_message_iframe_1234"></iframe>')
        await page.goto(URL)

        assert await dismiss_consent(page, "search page", config) is False

    @pytest.mark.asyncio
    async def test_sourcepoint_iframe(self, config):
        page = _page('<iframe id="sp_message_iframe_1234" srcdoc=\''
                     '<div class="message"><button title="Tout accepter" '
                     'id="sp-accept">Tout accepter</button></div>\'></iframe>')
        await page.goto(URL)

        assert await dismiss_consent(page, "search page", config) is True
        assert page.clicked == ["sp-accept"]

    @pytest.mark.asyncio
    async def test_consent_iframe_loaded_from_src(self, config):
        frame_url = "https://cmp.ledenicheur.fr/consent/index.html"
        page = _page(f'<iframe title="Consent" src="{frame_url}"></iframe>')
        page.pages[frame_url] = '<button id="cmp-ok">Accepter</button>'
        await page.goto(URL)

        assert await dismiss_consent(page, "product page", config) is True
        assert page.clicked == ["cmp-ok"]
