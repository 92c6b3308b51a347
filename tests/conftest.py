import pytest

from ledenicheur_scraper.config import Config, Timeouts


@pytest.fixture
def config():
    """Production settings with every delay removed."""
    return Config(
        timeouts=Timeouts(navigation_ms=1000, selector_ms=100,
                          short_selector_ms=100, probe_ms=50,
                          consent_ms=50, settle_ms=0),
        short_delay_min_ms=0,
        short_delay_max_ms=0,
        post_action_delay_min_ms=0,
        post_action_delay_max_ms=0,
        block_resources=False,
    )
