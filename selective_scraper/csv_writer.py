"""
CSV encoding of flat rows, plus the file sink.
"""

import csv
import io
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from .exceptions import EncodeWriteError
from .flatten import FlattenMode, flatten_pages
from .logger import get_module_logger
from .models import FlatRow, PageResult


logger = get_module_logger("csv_writer")

DELIMITER = ","
QUOTE = '"'
LINE_END = "\n"

_NEEDS_QUOTING = (DELIMITER, QUOTE, "\n", "\r")


def encode_field(value: Optional[Union[str, int]]) -> str:
    """Serialize one value, quoting it when it holds a delimiter, quote or line break."""
    if value is None:
        return ""
    text = str(value)
    if any(ch in text for ch in _NEEDS_QUOTING):
        return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE
    return text


def header_for(rows: Sequence[FlatRow], union_headers: bool = False) -> List[str]:
    """
    Column order for `rows`.

    By default only the first row's keys are used: keys that appear only in
    later rows are dropped, keys missing from a later row render as "".
    With union_headers, every key is kept in first-seen order.
    """
    if not rows:
        return []
    if not union_headers:
        return list(rows[0].keys())

    header: Dict[str, None] = {}
    for row in rows:
        for key in row:
            header.setdefault(key, None)
    return list(header)


def encode_csv(rows: Sequence[FlatRow], union_headers: bool = False) -> str:
    """Encode rows as CSV text; every line, header included, ends with a newline."""
    if not rows:
        logger.info("No data to save")
        return ""

    header = header_for(rows, union_headers)
    lines = [DELIMITER.join(encode_field(name) for name in header)]
    for row in rows:
        lines.append(DELIMITER.join(encode_field(row.get(name, "")) for name in header))

    return LINE_END.join(lines) + LINE_END


def parse_csv(text: str) -> List[Dict[str, str]]:
    """Read CSV text written by encode_csv back into rows of strings."""
    records = list(csv.reader(io.StringIO(text, newline=""), delimiter=DELIMITER, quotechar=QUOTE))
    if not records:
        return []

    header = records[0]
    return [dict(zip(header, values)) for values in records[1:]]


def write_csv(path: Union[str, Path], text: str) -> Path:
    """Write encoded CSV text to `path` as UTF-8."""
    path = Path(path)
    try:
        if path.parent and not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise EncodeWriteError(str(path), str(e)) from e
    return path


def save_to_csv(
    pages: Iterable[PageResult],
    path: Union[str, Path],
    mode: FlattenMode = FlattenMode.SEPARATE,
    text_only: bool = False,
    union_headers: bool = False
) -> bool:
    """
    Flatten, encode and write pages to a CSV file.

    Returns True when a file was written. An empty page list, pages without
    any rows, or a failed write all return False; none of them raise.
    """
    pages = list(pages)
    if not pages:
        logger.info("No data to save")
        return False

    rows = flatten_pages(pages, mode, text_only)
    if not rows:
        logger.info("No data extracted for CSV")
        return False

    text = encode_csv(rows, union_headers)
    try:
        written = write_csv(path, text)
    except EncodeWriteError as e:
        logger.error(e.message)
        return False

    columns = len(header_for(rows, union_headers))
    logger.info("Data saved to %s (%d rows, %d columns)", written, len(rows), columns)
    return True
