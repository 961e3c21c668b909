import os
import sys

import pytest

# Project root on the path so tests run without installing the package
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from selective_scraper.exceptions import FetchError


SAMPLE_HTML = """
<html>
  <head>
    <title>  Sample Page </title>
    <meta name="description" content="A sample page">
  </head>
  <body>
    <h1 id="main-title" class="hero big">Title</h1>
    <p>First paragraph</p>
    <p>   </p>
    <a href="/x" title="Go" target="_blank">link</a>
    <img src="/logo.png" alt="Logo" width="120">
  </body>
</html>
"""


class FakeFetcher:
    """Serves canned markup per URL; an Exception value is raised instead."""

    def __init__(self, pages):
        self.pages = pages
        self.requested = []

    async def fetch(self, url):
        self.requested.append(url)
        page = self.pages[url]
        if isinstance(page, Exception):
            raise page
        return page


@pytest.fixture
def sample_html():
    return SAMPLE_HTML


@pytest.fixture
def fake_fetcher():
    return FakeFetcher({
        "https://one.example": SAMPLE_HTML,
        "https://two.example": FetchError("https://two.example", "timeout of 15000ms exceeded"),
        "https://three.example": "<html><head><title>Three</title></head><body><h1>Third</h1></body></html>",
    })
