#!/usr/bin/env python3

import asyncio
import logging
import sys
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from .base import BaseScraper
from .document import SoupNode
from .errors import InvalidContestUrl, ScraperError, TransportFailure
from .models import ScraperConfig
from .orchestrator import ContestScraper

logger = logging.getLogger(__name__)

BASE_URL = "https://atcoder.jp"
TIMEOUT_SECONDS = 30
HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
}
USAGE = "Usage: atcoder-scrape <contest-url>\nExample: atcoder-scrape https://atcoder.jp/contests/abc001"


def parse_task_links(html: str, base_url: str) -> list[str]:
    """Absolute task URLs from the first table of a task-listing page, in row order."""
    soup = BeautifulSoup(html, "html.parser")
    table = soup.select_one("table")
    if not table:
        return []
    urls: list[str] = []
    for tr in table.select("tbody tr"):
        td = tr.find("td")
        if not td:
            continue
        a = td.find("a", href=True)
        if not a:
            continue
        href_attr = a.get("href")
        if not isinstance(href_attr, str):
            continue
        urls.append(urljoin(base_url, href_attr))
    return urls


class AtcoderScraper(BaseScraper):
    def __init__(
        self,
        config: ScraperConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.config = config or ScraperConfig()
        self._client = client or httpx.AsyncClient(
            headers=HEADERS,
            timeout=self.config.timeout_seconds,
            follow_redirects=True,
        )

    @property
    def platform_name(self) -> str:
        return "atcoder"

    async def _get(self, url: str) -> str:
        try:
            r = await self._client.get(url)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportFailure(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise TransportFailure(url, str(e) or type(e).__name__) from e
        return r.text

    async def fetch_task_listing(self, url: str) -> list[str]:
        logger.debug("Fetching contest tasks from %s", url)
        html = await self._get(url)
        return parse_task_links(html, url)

    async def fetch_document(self, url: str) -> SoupNode:
        logger.debug("Fetching problem %s", url)
        html = await self._get(url)
        return SoupNode.parse(html)

    async def aclose(self) -> None:
        await self._client.aclose()


async def main_async(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print(USAGE, file=sys.stderr)
        return 1

    contest_url = args[0]
    config = ScraperConfig(timeout_seconds=TIMEOUT_SECONDS)
    async with AtcoderScraper(config) as scraper:
        try:
            summary = await ContestScraper(scraper, config=config).scrape_contest(
                contest_url
            )
        except InvalidContestUrl as e:
            logger.error("%s", e)
            print(USAGE, file=sys.stderr)
            return 1
        except ScraperError as e:
            logger.error("Scraping failed: %s", e)
            return 1

    print(summary.model_dump_json())
    return 0


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    sys.exit(asyncio.run(main_async()))


if __name__ == "__main__":
    main()
