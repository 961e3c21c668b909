import re
from typing import Dict, List, Optional, Sequence, Tuple

from selectolax.lexbor import LexborHTMLParser, LexborNode

from .exceptions import SelectorError
from .logger import get_module_logger
from .models import ElementRecord, PageResult, SelectorResult, utc_timestamp


logger = get_module_logger("parser")

DEFAULT_SELECTORS = ["h1", "h2", "p", "a"]

# Attributes captured per tag, each defaulting to "" when absent
TAG_ATTRIBUTES: Dict[str, Tuple[str, ...]] = {
    "a": ("href", "title", "target"),
    "img": ("src", "alt", "width", "height"),
    "input": ("type", "name", "value", "placeholder"),
    "textarea": ("type", "name", "value", "placeholder"),
    "select": ("type", "name", "value", "placeholder"),
    "meta": ("name", "property", "content"),
}

FORM_TAGS = ("input", "textarea", "select")

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")


def sanitize_selector(selector: str) -> str:
    """Replace every character outside [A-Za-z0-9] with an underscore."""
    return _UNSAFE_CHARS.sub("_", selector)


def result_key(position: int, selector: str) -> str:
    """Key for the selector at 1-based `position`."""
    return f"selector_{position}_{sanitize_selector(selector)}"


def normalize_element(node: LexborNode, index: int) -> ElementRecord:
    """Build the ElementRecord for one matched node at its 0-based match position."""
    tag = (node.tag or "").lower()
    attrs = node.attributes

    data = {
        "index": index,
        "tag_name": tag,
        "text": node.text(deep=True).strip(),
        "html": _inner_html(node),
        "id": attrs.get("id") or "",
        "class": attrs.get("class") or "",
    }

    for attr in TAG_ATTRIBUTES.get(tag, ()):
        data[attr] = attrs.get(attr) or ""

    if tag in FORM_TAGS and not data["value"]:
        data["value"] = _form_value(node, tag)

    return ElementRecord(**data)


def _inner_html(node: LexborNode) -> str:
    return "".join(child.html or "" for child in node.iter(include_text=True))


def _form_value(node: LexborNode, tag: str) -> str:
    """Current value of a form control that has no value attribute."""
    if tag == "textarea":
        return node.text(deep=True)

    if tag == "select":
        options = node.css("option")
        if not options:
            return ""
        chosen = next((o for o in options if "selected" in o.attributes), options[0])
        value = chosen.attributes.get("value")
        return value if value is not None else chosen.text(deep=True).strip()

    return ""


class SelectorParser:
    """Runs a list of CSS selectors against a page and collects normalized matches."""

    def __init__(self, selectors: Optional[Sequence[str]] = None):
        if not selectors:
            logger.info("No selectors provided, using default: %s", ", ".join(DEFAULT_SELECTORS))
            selectors = DEFAULT_SELECTORS
        self.selectors: List[str] = list(selectors)

    def parse_page(self, html: str, url: str, timestamp: Optional[str] = None) -> PageResult:
        """Parse markup and extract every selector from it."""
        tree = LexborHTMLParser(html)
        return self.extract(tree, url, timestamp)

    def extract(self, tree: LexborHTMLParser, url: str, timestamp: Optional[str] = None) -> PageResult:
        """Extract every selector, in order, from an already parsed tree."""
        page = PageResult(
            url=url,
            timestamp=timestamp or utc_timestamp(),
            title=self._page_title(tree),
        )

        for position, selector in enumerate(self.selectors, start=1):
            try:
                elements = [
                    normalize_element(node, i)
                    for i, node in enumerate(self._query(tree, selector))
                ]
                result = SelectorResult(selector=selector, count=len(elements), elements=elements)
            except SelectorError as e:
                logger.warning("Error processing selector '%s': %s", selector, e.message)
                result = SelectorResult(selector=selector, error=e.message)

            page.selector_results.append((result_key(position, selector), result))

        return page

    def _query(self, tree: LexborHTMLParser, selector: str) -> List[LexborNode]:
        try:
            return list(tree.css(selector))
        except Exception as e:
            raise SelectorError(selector, str(e) or type(e).__name__) from e

    def _page_title(self, tree: LexborHTMLParser) -> str:
        title = tree.css_first("title")
        text = title.text(deep=True).strip() if title is not None else ""
        return text or "No Title"


def extract_page(
    html: str,
    selectors: Optional[Sequence[str]],
    url: str,
    timestamp: Optional[str] = None
) -> PageResult:
    """Convenience wrapper: parse `html` and run `selectors` over it."""
    return SelectorParser(selectors).parse_page(html, url, timestamp)
