import asyncio
import logging
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

import typer
from rich.console import Console

from .browser import BrowserFetcher
from .core import SelectiveScraper
from .csv_writer import save_to_csv
from .display import display_results
from .exceptions import FetchError
from .fetcher import HttpFetcher
from .flatten import FlattenMode
from .logger import setup_logger
from .models import ScraperConfig, utc_timestamp


app = typer.Typer(help="Scrape specific elements from web pages into CSV using CSS selectors")
console = Console()

SELECTOR_HELP = (
    "CSS selectors to extract, e.g. h1 'a[href]' .product-title '#main' "
    "(default: h1 h2 p a)"
)


@app.command()
def run(
    url: str = typer.Argument(..., help="URL of the page to scrape"),
    selectors: Optional[List[str]] = typer.Argument(None, help=SELECTOR_HELP),
    combined: bool = typer.Option(
        False,
        "--combined",
        help="Save as one row per URL (default: separate rows per element)"
    ),
    text_only: bool = typer.Option(
        False,
        "--text-only",
        help="Save only URL, selector, and text content (no href, attributes, etc.)"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="CSV file path"),
    output_dir: Path = typer.Option(Path("."), "--output-dir", help="Directory for the generated CSV file"),
    union_columns: bool = typer.Option(
        False,
        "--union-columns",
        help="Use every column seen in any row (default: columns of the first row)"
    ),
    use_browser: bool = typer.Option(
        False,
        "--browser",
        "-b",
        help="Use browser automation for JavaScript-heavy sites"
    ),
    wait_for: Optional[str] = typer.Option(None, "--wait-for", help="CSS selector to wait for in browser mode"),
    timeout: Optional[int] = typer.Option(None, "--timeout", help="Request timeout in milliseconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")
):
    """Scrape one page and save the selected elements to CSV."""

    setup_logger(level=logging.DEBUG if verbose else logging.INFO)

    if not validate_url(url):
        console.print(f"❌ Error: Invalid URL: {url}", markup=False, style="red")
        raise typer.Exit(1)

    mode = FlattenMode.COMBINED if combined else FlattenMode.SEPARATE
    config = ScraperConfig.from_env(timeout_ms=timeout)

    console.print(f"🎯 Targeting specific elements on: {url}", markup=False)
    if selectors:
        console.print(f"📋 Selectors: {', '.join(selectors)}", markup=False)

    scraper = SelectiveScraper(config=config, fetcher=_make_fetcher(config, use_browser, wait_for))

    try:
        page = asyncio.run(scraper.scrape_url(url, selectors))
    except FetchError as e:
        console.print(f"❌ Error: {e.message}", markup=False, style="red")
        raise typer.Exit(1)

    display_results(page, console)

    path = output or output_dir / default_filename(mode, text_only)
    if save_to_csv([page], path, mode, text_only, union_columns):
        console.print(f"\n[green]✅ Data saved to {path}[/green]")
        console.print(f"\n📊 Results saved in {mode.value}{' text-only' if text_only else ''} mode")
    else:
        console.print("\n[yellow]No CSV written[/yellow]")


@app.command()
def batch(
    urls_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="Text file with one URL per line ('#' starts a comment)"
    ),
    selectors: Optional[List[str]] = typer.Argument(None, help=SELECTOR_HELP),
    combined: bool = typer.Option(False, "--combined", help="Save as one row per URL"),
    text_only: bool = typer.Option(False, "--text-only", help="Save only URL, selector, and text content"),
    delay: Optional[int] = typer.Option(None, "--delay", "-d", help="Pause between requests in milliseconds (default: 2000)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="CSV file path"),
    output_dir: Path = typer.Option(Path("."), "--output-dir", help="Directory for the generated CSV file"),
    union_columns: bool = typer.Option(False, "--union-columns", help="Use every column seen in any row"),
    use_browser: bool = typer.Option(False, "--browser", "-b", help="Use browser automation"),
    wait_for: Optional[str] = typer.Option(None, "--wait-for", help="CSS selector to wait for in browser mode"),
    timeout: Optional[int] = typer.Option(None, "--timeout", help="Request timeout in milliseconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")
):
    """Scrape every URL in a file and save all pages to one CSV."""

    setup_logger(level=logging.DEBUG if verbose else logging.INFO)

    urls = []
    for url in load_urls(urls_file):
        if validate_url(url):
            urls.append(url)
        else:
            console.print(f"Skipping invalid URL: {url}", markup=False, style="yellow")

    if not urls:
        console.print("[red]Error: No valid URLs to scrape[/red]")
        raise typer.Exit(1)

    mode = FlattenMode.COMBINED if combined else FlattenMode.SEPARATE
    config = ScraperConfig.from_env(timeout_ms=timeout, delay_ms=delay)

    scraper = SelectiveScraper(config=config, fetcher=_make_fetcher(config, use_browser, wait_for))
    pages = asyncio.run(scraper.scrape_multiple_urls(urls, selectors))

    console.print(f"\n[green]Scraped {len(pages)}/{len(urls)} pages[/green]")
    for failed_url, message in scraper.failures:
        console.print(f"❌ {failed_url}: {message}", markup=False, style="red")

    path = output or output_dir / default_filename(mode, text_only)
    if save_to_csv(pages, path, mode, text_only, union_columns):
        console.print(f"[green]✅ Data saved to {path}[/green]")
    else:
        console.print("[yellow]No CSV written[/yellow]")


def validate_url(url: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def load_urls(path: Path) -> List[str]:
    """Read URLs from a file, one per line, skipping blanks and comments."""
    urls = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            urls.append(line)
    return urls


def default_filename(mode: FlattenMode, text_only: bool, timestamp: Optional[str] = None) -> str:
    """scraped_selective_<mode>[_text_only]_<timestamp>.csv, with ':' and '.' in the timestamp made file-safe."""
    stamp = (timestamp or utc_timestamp()).replace(":", "-").replace(".", "-")
    text_mode = "_text_only" if text_only else ""
    return f"scraped_selective_{FlattenMode(mode).value}{text_mode}_{stamp}.csv"


def _make_fetcher(config: ScraperConfig, use_browser: bool, wait_for: Optional[str]):
    if use_browser:
        console.print("[yellow]Browser mode enabled - JavaScript content will be rendered[/yellow]")
        return BrowserFetcher(config, wait_for=wait_for)
    return HttpFetcher(config)


if __name__ == "__main__":
    app()
