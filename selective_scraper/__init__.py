"""
Selective web scraper: CSS-selector extraction of page elements into CSV.
"""

from .models import ElementRecord, SelectorResult, PageResult, ScraperConfig, FlatRow
from .parser import SelectorParser, DEFAULT_SELECTORS, extract_page, normalize_element, sanitize_selector
from .flatten import FlattenMode, flatten_page, flatten_pages, clean_for_csv
from .csv_writer import encode_csv, parse_csv, write_csv, save_to_csv
from .core import SelectiveScraper
from .fetcher import HttpFetcher
from .browser import BrowserFetcher
from .display import display_results
from .exceptions import ScraperError, FetchError, SelectorError, EncodeWriteError

__version__ = "1.0.0"

__all__ = [
    "ElementRecord",
    "SelectorResult",
    "PageResult",
    "ScraperConfig",
    "FlatRow",
    "SelectorParser",
    "DEFAULT_SELECTORS",
    "extract_page",
    "normalize_element",
    "sanitize_selector",
    "FlattenMode",
    "flatten_page",
    "flatten_pages",
    "clean_for_csv",
    "encode_csv",
    "parse_csv",
    "write_csv",
    "save_to_csv",
    "SelectiveScraper",
    "HttpFetcher",
    "BrowserFetcher",
    "display_results",
    "ScraperError",
    "FetchError",
    "SelectorError",
    "EncodeWriteError",
]
