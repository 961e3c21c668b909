"""
Exceptions raised by the selective scraper.

Severity per kind:
  - FetchError       → fatal for a single URL, skipped (and reported) in batch runs.
  - SelectorError    → isolated to one selector; turned into an error result.
  - EncodeWriteError → reported by save_to_csv, the run otherwise completes.
"""

from typing import Optional


class ScraperError(Exception):
    """Base exception for all scraper errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class FetchError(ScraperError):
    """Raised when a page cannot be fetched (transport, timeout, HTTP status)."""

    def __init__(self, url: str, message: str, details: Optional[dict] = None):
        super().__init__(f"Scraping failed: {message}", details)
        self.url = url


class SelectorError(ScraperError):
    """Raised when a selector query fails. Never escapes the extraction pass."""

    def __init__(self, selector: str, message: str):
        super().__init__(message)
        self.selector = selector


class EncodeWriteError(ScraperError):
    """Raised when encoded CSV output cannot be written."""

    def __init__(self, path: str, message: str):
        super().__init__(f"Failed to save CSV: {message}")
        self.path = path
