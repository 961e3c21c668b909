"""
Example usage of the selective scraper.
"""

import asyncio

from selective_scraper import (
    FlattenMode,
    ScraperConfig,
    SelectiveScraper,
    display_results,
    save_to_csv,
)


async def example_1_single_page():
    """Scrape headings and links from one page into a per-element CSV."""
    print("=" * 60)
    print("Example 1: Single Page, One Row per Element")
    print("=" * 60)

    scraper = SelectiveScraper()

    try:
        page = await scraper.scrape_url("https://example.com", ["h1", "p", "a[href]"])
        display_results(page)
        save_to_csv([page], "example_separate.csv", FlattenMode.SEPARATE)
    except Exception as e:
        print(f"Error: {e}")


async def example_2_batch_combined():
    """Scrape several pages, one summary row per page."""
    print("\n" + "=" * 60)
    print("Example 2: Batch Scraping, One Row per Page")
    print("=" * 60)

    config = ScraperConfig(delay_ms=1000, timeout_ms=10000)
    scraper = SelectiveScraper(config=config)

    urls = [
        "https://example.com",
        "https://example.org",
        "https://example.net",
    ]

    pages = await scraper.scrape_multiple_urls(urls, ["h1", "a"])
    print(f"\n✓ Scraped {len(pages)}/{len(urls)} pages")
    for url, message in scraper.failures:
        print(f"  failed: {url} ({message})")

    # Pages without links have no a_hrefs column, so keep every column
    save_to_csv(pages, "example_combined.csv", FlattenMode.COMBINED, union_headers=True)


async def example_3_text_only():
    """Only URL, selector and text, e.g. for feeding into a text pipeline."""
    print("\n" + "=" * 60)
    print("Example 3: Text-Only Output")
    print("=" * 60)

    scraper = SelectiveScraper()

    try:
        page = await scraper.scrape_url("https://example.com", ["p"])
        save_to_csv([page], "example_text_only.csv", text_only=True)
    except Exception as e:
        print(f"Error: {e}")


async def main():
    await example_1_single_page()
    await example_2_batch_combined()
    await example_3_text_only()


if __name__ == "__main__":
    asyncio.run(main())
