"""
Tests for separate/combined flattening.
"""

from selective_scraper.flatten import FlattenMode, clean_for_csv, flatten_page, flatten_pages
from selective_scraper.models import ElementRecord, PageResult, SelectorResult
from selective_scraper.parser import extract_page


FULL_COLUMNS = [
    "url", "timestamp", "page_title", "selector", "element_index", "tag_name",
    "text_content", "html_content", "href", "src", "alt", "title_attr", "id",
    "class", "type", "name", "value", "width", "height",
]

TS = "2024-01-01T00:00:00.000Z"


def _page(sample_html, selectors=("h1", "p", "a")):
    return extract_page(sample_html, list(selectors), "https://one.example", TS)


class TestCleanForCsv:

    def test_empty_values(self):
        assert clean_for_csv(None) == ""
        assert clean_for_csv("") == ""

    def test_whitespace_is_collapsed(self):
        assert clean_for_csv("  x\ny \r\n z\t\tw ") == "x y z w"

    def test_quotes_are_left_for_the_encoder(self):
        assert clean_for_csv('a,b"c') == 'a,b"c'

    def test_numbers(self):
        assert clean_for_csv(7) == "7"


class TestSeparateMode:

    def test_one_row_per_element(self, sample_html):
        rows = flatten_page(_page(sample_html), FlattenMode.SEPARATE)

        assert [row["selector"] for row in rows] == ["h1", "p", "p", "a"]
        assert all(list(row.keys()) == FULL_COLUMNS for row in rows)

        h1, p_full, p_empty, a = rows
        assert h1["text_content"] == "Title"
        assert h1["id"] == "main-title"
        assert h1["class"] == "hero big"
        assert h1["page_title"] == "Sample Page"
        assert h1["timestamp"] == TS
        assert p_full["element_index"] == 0
        assert p_empty["element_index"] == 1
        assert p_empty["text_content"] == ""
        assert a["href"] == "/x"
        assert a["title_attr"] == "Go"
        assert a["src"] == ""

    def test_text_only_columns(self, sample_html):
        rows = flatten_page(_page(sample_html), FlattenMode.SEPARATE, text_only=True)
        assert rows[0] == {"url": "https://one.example", "selector": "h1", "text_content": "Title"}
        assert all(list(row.keys()) == ["url", "selector", "text_content"] for row in rows)

    def test_zero_matches_contribute_no_rows(self, sample_html):
        rows = flatten_page(_page(sample_html, ["table", "h1"]), FlattenMode.SEPARATE)
        assert [row["selector"] for row in rows] == ["h1"]

    def test_error_results_contribute_no_rows(self):
        page = PageResult(url="https://x.example", timestamp=TS, title="X", selector_results=[
            ("selector_1_a__", SelectorResult(selector="a[[", error="Bad CSS Selectors")),
        ])
        assert flatten_page(page, FlattenMode.SEPARATE) == []

    def test_values_are_sanitized_at_construction(self):
        element = ElementRecord(index=0, tag_name="p", text="line one\nline two", html="<b>x</b>\n")
        page = PageResult(url="https://x.example", timestamp=TS, title="A\nB", selector_results=[
            ("selector_1_p", SelectorResult(selector="p", count=1, elements=[element])),
        ])
        row = flatten_page(page)[0]
        assert row["text_content"] == "line one line two"
        assert row["html_content"] == "<b>x</b>"
        assert row["page_title"] == "A B"

    def test_flattening_is_idempotent(self, sample_html):
        page = _page(sample_html)
        assert flatten_page(page, FlattenMode.SEPARATE) == flatten_page(page, FlattenMode.SEPARATE)
        assert flatten_page(page, FlattenMode.COMBINED) == flatten_page(page, FlattenMode.COMBINED)


class TestCombinedMode:

    def test_one_row_per_page(self, sample_html):
        rows = flatten_page(_page(sample_html), FlattenMode.COMBINED)
        assert len(rows) == 1

        row = rows[0]
        assert list(row.keys()) == [
            "url", "timestamp", "page_title",
            "h1_count", "h1_texts",
            "p_count", "p_texts",
            "a_count", "a_texts", "a_hrefs",
        ]
        assert row["p_count"] == 2
        assert row["p_texts"] == "First paragraph"
        assert row["a_hrefs"] == "/x"

    def test_texts_are_pipe_joined(self):
        html = "<ul><li>One</li><li></li><li>Two</li></ul>"
        page = extract_page(html, ["li"], "https://x.example", TS)
        row = flatten_page(page, FlattenMode.COMBINED)[0]
        assert row["li_count"] == 3
        assert row["li_texts"] == "One | Two"

    def test_text_only_has_no_hrefs(self, sample_html):
        row = flatten_page(_page(sample_html), FlattenMode.COMBINED, text_only=True)[0]
        assert "a_hrefs" not in row
        assert row["a_texts"] == "link"

    def test_error_result_still_gets_count_and_texts(self):
        page = PageResult(url="https://x.example", timestamp=TS, title="X", selector_results=[
            ("selector_1_a__", SelectorResult(selector="a[[", error="Bad CSS Selectors")),
        ])
        row = flatten_page(page, FlattenMode.COMBINED)[0]
        assert row["a___count"] == 0
        assert row["a___texts"] == ""

    def test_mode_accepts_plain_strings(self, sample_html):
        page = _page(sample_html)
        assert flatten_page(page, "combined") == flatten_page(page, FlattenMode.COMBINED)

    def test_multiple_pages_can_differ_in_columns(self, sample_html):
        with_link = _page(sample_html, ["a"])
        without_link = extract_page("<p>none</p>", ["a"], "https://two.example", TS)

        rows = flatten_pages([with_link, without_link], FlattenMode.COMBINED)
        assert len(rows) == 2
        assert "a_hrefs" in rows[0]
        assert "a_hrefs" not in rows[1]
