import asyncio
from contextlib import asynccontextmanager
from typing import List, Optional, Sequence, Tuple

from tqdm import tqdm

from .exceptions import FetchError
from .fetcher import HttpFetcher
from .logger import get_module_logger
from .models import PageResult, ScraperConfig
from .parser import SelectorParser


logger = get_module_logger("core")


class SelectiveScraper:
    """Fetches pages and extracts the elements matched by a list of CSS selectors."""

    def __init__(
        self,
        config: Optional[ScraperConfig] = None,
        fetcher=None,
        verbose: bool = True
    ):
        """
        Args:
            config: request and batch settings (defaults to ScraperConfig())
            fetcher: object with an async fetch(url) -> str; may also be an
                async context manager. Defaults to an HttpFetcher.
            verbose: show a progress bar for batch runs
        """
        self.config = config or ScraperConfig()
        self.fetcher = fetcher
        self.verbose = verbose
        self.failures: List[Tuple[str, str]] = []

    async def scrape_url(self, url: str, selectors: Optional[Sequence[str]] = None) -> PageResult:
        """
        Fetch one page and extract `selectors` from it.

        Raises:
            FetchError: when the page cannot be fetched
        """
        async with self._open_fetcher() as fetcher:
            return await self._scrape_with(fetcher, url, SelectorParser(selectors))

    async def scrape_multiple_urls(
        self,
        urls: Sequence[str],
        selectors: Optional[Sequence[str]] = None,
        delay_ms: Optional[int] = None
    ) -> List[PageResult]:
        """
        Scrape several pages one after another, pausing between requests.

        A page that fails is logged, added to self.failures and skipped, so the
        result holds only successful pages, in input order.
        """
        delay_ms = self.config.delay_ms if delay_ms is None else delay_ms
        parser = SelectorParser(selectors)
        results: List[PageResult] = []
        self.failures = []

        async with self._open_fetcher() as fetcher:
            for i, url in enumerate(tqdm(urls, desc="Scraping", unit="page", disable=not self.verbose)):
                logger.info("Processing %d/%d", i + 1, len(urls))
                try:
                    results.append(await self._scrape_with(fetcher, url, parser))
                except Exception as e:
                    message = e.message if isinstance(e, FetchError) else str(e)
                    logger.error("Failed to scrape %s: %s", url, message)
                    self.failures.append((url, message))

                if delay_ms > 0 and i < len(urls) - 1:
                    logger.info("Waiting %s seconds...", delay_ms / 1000)
                    await asyncio.sleep(delay_ms / 1000)

        logger.info("Scraped %d/%d pages", len(results), len(urls))
        return results

    async def _scrape_with(self, fetcher, url: str, parser: SelectorParser) -> PageResult:
        logger.info("Scraping: %s", url)
        logger.info("Target selectors: %s", ", ".join(parser.selectors))

        html = await fetcher.fetch(url)
        page = parser.parse_page(html, url)

        logger.debug("Extracted %d elements from %s", page.total_elements, url)
        return page

    @asynccontextmanager
    async def _open_fetcher(self):
        if self.fetcher is None:
            async with HttpFetcher(self.config) as fetcher:
                yield fetcher
        elif hasattr(self.fetcher, "__aenter__"):
            async with self.fetcher as fetcher:
                yield fetcher
        else:
            yield self.fetcher
