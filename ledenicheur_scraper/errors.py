class ScraperError(Exception):
    """Base class for failures the caller has to act on."""


class BotChallengeError(ScraperError):
    """The site answered with an anti-automation challenge instead of content."""

    def __init__(self, url: str, kind: str):
        self.url = url
        self.kind = kind
        super().__init__(f"Bot challenge ({kind}) detected on page: {url}")
