"""
Runtime configuration for the ledenicheur.fr scraper.

Two presets mirror the way the scraper is run: ``production`` (headless,
short timeouts, minimal slow-mo) and ``development`` (headed browser, long
timeouts so a human can watch the run). The chosen ``Config`` is passed into
the pipeline explicitly; nothing reads a global mode flag.
"""

from dataclasses import dataclass, field, replace
import logging
import os
import random

logger = logging.getLogger(__name__)


BASE_URL = "https://ledenicheur.fr"
SEARCH_PATH = "/search?query="

# Minimum similarity (0..1) a search result needs to be accepted as a match.
SIMILARITY_THRESHOLD = 0.3

USER_AGENTS = [
    # Chrome
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    # Firefox
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:109.0) "
    "Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (X11; Linux x86_64; rv:109.0) Gecko/20100101 Firefox/121.0",
    # Safari
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Safari/605.1.15",
]

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-blink-features=AutomationControlled",
    "--no-first-run",
    "--disable-extensions",
]

# Third-party requests that never carry product data.
BLOCKED_DOMAINS = [
    "google-analytics.com", "googletagmanager.com", "facebook.net",
    "twitter.com", "bing.com", "hotjar.com", "criteo.com",
    "adservice.google.com", "googlesyndication.com", "doubleclick.net",
]
BLOCKED_RESOURCE_TYPES = ["font", "media"]

# Product pictures are served from this CDN; everything else image-like is noise.
IMAGE_HOST = "pricespy"


def random_user_agent() -> str:
    return random.choice(USER_AGENTS)


@dataclass
class Timeouts:
    navigation_ms: int = 90000
    selector_ms: int = 10000
    short_selector_ms: int = 5000
    probe_ms: int = 1000
    consent_ms: int = 1500
    settle_ms: int = 2000

    @classmethod
    def production(cls) -> "Timeouts":
        return cls()

    @classmethod
    def development(cls) -> "Timeouts":
        return cls(navigation_ms=180000, selector_ms=20000,
                   short_selector_ms=10000, probe_ms=1500,
                   consent_ms=3000, settle_ms=3000)


@dataclass
class Config:
    headless: bool = True
    slow_mo_ms: int = 50
    viewport_width: int = 1920
    viewport_height: int = 1080
    locale: str = "fr-FR"
    timeouts: Timeouts = field(default_factory=Timeouts.production)

    short_delay_min_ms: int = 500
    short_delay_max_ms: int = 1500
    post_action_delay_min_ms: int = 1000
    post_action_delay_max_ms: int = 2000

    similarity_threshold: float = SIMILARITY_THRESHOLD
    base_url: str = BASE_URL
    block_resources: bool = True

    @classmethod
    def production(cls) -> "Config":
        return cls()

    @classmethod
    def development(cls) -> "Config":
        return cls(headless=False, slow_mo_ms=250,
                   timeouts=Timeouts.development(),
                   short_delay_min_ms=1000, short_delay_max_ms=3000,
                   post_action_delay_max_ms=3000)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a config from ``LEDENICHEUR_*`` environment variables."""
        env = os.getenv("LEDENICHEUR_ENV", "production").lower()
        config = cls.development() if env == "development" else cls.production()

        headless = os.getenv("LEDENICHEUR_HEADLESS")
        if headless is not None:
            config.headless = headless.lower() in ("1", "true", "yes")

        threshold = os.getenv("LEDENICHEUR_SIMILARITY_THRESHOLD")
        if threshold:
            try:
                config.similarity_threshold = float(threshold)
            except ValueError:
                logger.warning(f"Ignoring LEDENICHEUR_SIMILARITY_THRESHOLD="
                               f"{threshold!r}, not a number")
        return config

    def with_overrides(self, **changes) -> "Config":
        return replace(self, **changes)

    @property
    def search_url_prefix(self) -> str:
        return self.base_url.rstrip("/") + SEARCH_PATH
