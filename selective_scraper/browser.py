"""
Browser-based fetching for JavaScript-heavy sites using Playwright.
"""

import asyncio
from typing import Optional

from playwright.async_api import Browser, Error as PlaywrightError, async_playwright

from .exceptions import FetchError
from .logger import get_module_logger
from .models import ScraperConfig


logger = get_module_logger("browser")


class BrowserFetcher:
    """Fetches rendered markup through headless Chromium."""

    def __init__(
        self,
        config: Optional[ScraperConfig] = None,
        wait_for: Optional[str] = None,
        headless: bool = True
    ):
        self.config = config or ScraperConfig()
        self.wait_for = wait_for
        self.headless = headless
        self.browser: Optional[Browser] = None
        self.playwright = None

    async def __aenter__(self):
        """Context manager entry."""
        self.playwright = await async_playwright().start()
        self.browser = await self.playwright.chromium.launch(headless=self.headless)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        if self.browser:
            await self.browser.close()
        if self.playwright:
            await self.playwright.stop()

    async def fetch(self, url: str) -> str:
        """
        Load a page in the browser and return the rendered HTML.

        Raises:
            FetchError: when navigation fails or times out
        """
        if not self.browser:
            raise RuntimeError("Browser not initialized. Use async with context manager.")

        page = await self.browser.new_page(
            user_agent=self.config.user_agent,
            extra_http_headers=self.config.headers or None
        )

        try:
            response = await page.goto(url, wait_until="networkidle", timeout=self.config.timeout_ms)
            if response is not None and not response.ok:
                raise FetchError(url, f"Request failed with status code {response.status}",
                                 {"status_code": response.status})

            if self.wait_for:
                try:
                    await page.wait_for_selector(self.wait_for, timeout=self.config.timeout_ms)
                except PlaywrightError as e:
                    logger.warning("Timeout waiting for selector '%s': %s", self.wait_for, e)
            else:
                await page.wait_for_load_state("domcontentloaded")
                await asyncio.sleep(1)  # Extra time for client-side rendering

            return await page.content()

        except PlaywrightError as e:
            raise FetchError(url, str(e)) from e

        finally:
            await page.close()
