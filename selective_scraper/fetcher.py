"""
HTTP fetching with httpx.
"""

from typing import Optional

import httpx

from .exceptions import FetchError
from .logger import get_module_logger
from .models import ScraperConfig


logger = get_module_logger("fetcher")


class HttpFetcher:
    """Fetches raw markup over HTTP. Use as an async context manager."""

    def __init__(self, config: Optional[ScraperConfig] = None):
        self.config = config or ScraperConfig()
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Context manager entry."""
        self.client = httpx.AsyncClient(
            headers=self.config.request_headers,
            timeout=self.config.timeout_ms / 1000,
            follow_redirects=True,
            max_redirects=self.config.max_redirects
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        if self.client:
            await self.client.aclose()
            self.client = None

    async def fetch(self, url: str) -> str:
        """
        Fetch a page and return its body as text.

        Raises:
            FetchError: on transport errors, timeouts, too many redirects
                or a non-success status code
        """
        if not self.client:
            raise RuntimeError("Client not initialized. Use async with context manager.")

        logger.debug("GET %s", url)
        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise FetchError(url, f"timeout of {self.config.timeout_ms}ms exceeded") from e
        except httpx.HTTPStatusError as e:
            raise FetchError(
                url,
                f"Request failed with status code {e.response.status_code}",
                {"status_code": e.response.status_code}
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(url, str(e) or type(e).__name__) from e

        return response.text
