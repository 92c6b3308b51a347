"""
ledenicheur.fr product lookup.

Given a free-text product name, find the best-matching listing on
ledenicheur.fr and extract its datasheet, pictures and price-history
summary.

    from ledenicheur_scraper import LedenicheurScraper
    details = asyncio.run(LedenicheurScraper().scrape("Apple MacBook Pro M2"))
"""

from .config import Config, Timeouts
from .errors import BotChallengeError, ScraperError
from .models import (
    PriceHistorySummary,
    ProductDetails,
    ScoredCandidate,
    SearchCandidate,
    Specification,
)
from .pipeline import LedenicheurScraper
from .similarity import score
from .text import normalize, parse_number

__all__ = [
    "BotChallengeError",
    "Config",
    "LedenicheurScraper",
    "PriceHistorySummary",
    "ProductDetails",
    "ScoredCandidate",
    "ScraperError",
    "SearchCandidate",
    "Specification",
    "Timeouts",
    "normalize",
    "parse_number",
    "score",
]
