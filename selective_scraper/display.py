"""
Console summary of a scraped page.
"""

from typing import Optional

from rich.console import Console

from .models import PageResult


PREVIEW_ELEMENTS = 5
PREVIEW_CHARS = 100


def display_results(page: PageResult, console: Optional[Console] = None) -> None:
    """Print each selector's match count and a preview of the first few matches."""
    console = console or Console()

    console.print("\n[bold]=== SCRAPING RESULTS ===[/bold]")
    console.print(f"URL: {page.url}", markup=False)
    console.print(f"Title: {page.title}", markup=False)

    for _, result in page.selector_results:
        console.print(f"\n--- {result.selector} ({result.count} found) ---", markup=False, style="cyan")

        if result.is_error:
            console.print(f"❌ Error: {result.error}", markup=False, style="red")
            continue

        if not result.elements:
            console.print("   No elements found")
            continue

        for i, element in enumerate(result.elements[:PREVIEW_ELEMENTS], 1):
            text = element.text
            if len(text) > PREVIEW_CHARS:
                text = text[:PREVIEW_CHARS] + "..."
            console.print(f"{i}. {text}", markup=False)
            if element.href:
                console.print(f"   Link: {element.href}", markup=False)
            if element.src:
                console.print(f"   Image: {element.src}", markup=False)

        if len(result.elements) > PREVIEW_ELEMENTS:
            console.print(f"   ... and {len(result.elements) - PREVIEW_ELEMENTS} more")
