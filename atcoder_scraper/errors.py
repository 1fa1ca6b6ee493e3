class ScraperError(Exception):
    pass


class InvalidContestUrl(ScraperError, ValueError):
    def __init__(self, url: str):
        super().__init__(f"Invalid contest URL: {url!r}")
        self.url = url


class TransportFailure(ScraperError):
    """A page could not be retrieved (connection error or non-2xx status)."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason
