"""
Flattening of page results into CSV-ready rows.

Two layouts are supported:
  separate - one row per matched element
  combined - one row per page, with <selector>_count / _texts / _hrefs columns
"""

import re
from enum import Enum
from typing import Iterable, List, Optional, Union

from .models import ElementRecord, FlatRow, PageResult
from .parser import sanitize_selector


JOIN_SEPARATOR = " | "

_LINE_BREAKS = re.compile(r"\r?\n")
_WHITESPACE = re.compile(r"\s+")


class FlattenMode(str, Enum):
    SEPARATE = "separate"
    COMBINED = "combined"


def clean_for_csv(value: Optional[Union[str, int]]) -> str:
    """Collapse line breaks and whitespace runs into single spaces and trim."""
    if value is None or value == "":
        return ""
    text = _LINE_BREAKS.sub(" ", str(value))
    return _WHITESPACE.sub(" ", text).strip()


def flatten_page(page: PageResult, mode: FlattenMode = FlattenMode.SEPARATE, text_only: bool = False) -> List[FlatRow]:
    """Rows for a single page."""
    if FlattenMode(mode) is FlattenMode.SEPARATE:
        return _separate_rows(page, text_only)
    return [_combined_row(page, text_only)]


def flatten_pages(
    pages: Iterable[PageResult],
    mode: FlattenMode = FlattenMode.SEPARATE,
    text_only: bool = False
) -> List[FlatRow]:
    """Rows for several pages, concatenated in page order."""
    rows: List[FlatRow] = []
    for page in pages:
        rows.extend(flatten_page(page, mode, text_only))
    return rows


def _separate_rows(page: PageResult, text_only: bool) -> List[FlatRow]:
    rows = []
    for _, result in page.selector_results:
        # Error results have no elements and so add no rows
        for element in result.elements:
            if text_only:
                rows.append({
                    "url": page.url,
                    "selector": result.selector,
                    "text_content": clean_for_csv(element.text),
                })
            else:
                rows.append(_full_row(page, result.selector, element))
    return rows


def _full_row(page: PageResult, selector: str, element: ElementRecord) -> FlatRow:
    return {
        "url": page.url,
        "timestamp": page.timestamp,
        "page_title": clean_for_csv(page.title),
        "selector": selector,
        "element_index": element.index,
        "tag_name": element.tag_name,
        "text_content": clean_for_csv(element.text),
        "html_content": clean_for_csv(element.html),
        "href": clean_for_csv(element.href),
        "src": clean_for_csv(element.src),
        "alt": clean_for_csv(element.alt),
        "title_attr": clean_for_csv(element.title),
        "id": clean_for_csv(element.id),
        "class": clean_for_csv(element.class_),
        "type": clean_for_csv(element.type),
        "name": clean_for_csv(element.name),
        "value": clean_for_csv(element.value),
        "width": clean_for_csv(element.width),
        "height": clean_for_csv(element.height),
    }


def _combined_row(page: PageResult, text_only: bool) -> FlatRow:
    row: FlatRow = {
        "url": page.url,
        "timestamp": page.timestamp,
        "page_title": clean_for_csv(page.title),
    }

    for _, result in page.selector_results:
        name = sanitize_selector(result.selector)
        texts = [el.text for el in result.elements if el.text]

        row[f"{name}_count"] = result.count
        row[f"{name}_texts"] = clean_for_csv(JOIN_SEPARATOR.join(texts))

        if not text_only:
            hrefs = [el.href for el in result.elements if el.href]
            # Omitted rather than emptied when nothing has an href
            if hrefs:
                row[f"{name}_hrefs"] = clean_for_csv(JOIN_SEPARATOR.join(hrefs))

    return row
