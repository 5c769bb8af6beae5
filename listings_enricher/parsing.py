"""CSV/TSV tokenizer for listings and climate text.

Turns pasted or uploaded text into an ordered list of header-keyed string
records. No type inference happens here: every value stays a string, and
columns missing from a short row are simply absent from its record so that
structural validation can report them.
"""

import csv
import io
import logging
from typing import List, Optional

from listings_enricher.errors import MalformedInputError
from listings_enricher.records import RawRecord

logger = logging.getLogger(__name__)

def detect_delimiter(header_line: str) -> str:
    """Pick the field delimiter from the header line.

    Tab wins when present (TSV), then semicolon if the line has no comma,
    otherwise comma.
    """
    if "\t" in header_line:
        return "\t"
    if ";" in header_line and "," not in header_line:
        return ";"
    return ","


def parse_table(text: Optional[str], source: str = "input") -> List[RawRecord]:
    """Parse delimited text with a header row into records.

    Args:
        text: Raw CSV or TSV text
        source: Dataset name used in error messages ("listings", "climate")

    Returns:
        One dict per non-empty data row, keyed by trimmed lower-case header

    Raises:
        MalformedInputError: If the text cannot be tokenized or the header
            has no column names or repeats one

    Example:
        >>> parse_table("APN,Flood_Zone\\n1234567890,AE\\n", source="climate")
        [{'apn': '1234567890', 'flood_zone': 'AE'}]
    """
    if text is None:
        return []
    lines = text.lstrip("\ufeff").splitlines(keepends=True)
    start = next((i for i, line in enumerate(lines) if line.strip()), None)
    if start is None:
        return []

    header_line = lines[start]
    reader = csv.reader(
        io.StringIO("".join(lines[start:])),
        delimiter=detect_delimiter(header_line),
        strict=True,
    )
    try:
        header = [h.strip().lower() for h in next(reader)]
        rows = [row for row in reader if any(cell.strip() for cell in row)]
    except csv.Error as e:
        raise MalformedInputError(source, f"line {start + reader.line_num}: {e}") from e

    named = [h for h in header if h]
    if not named:
        raise MalformedInputError(source, "header row has no column names")
    duplicates = sorted({h for h in named if named.count(h) > 1})
    if duplicates:
        raise MalformedInputError(source, f"duplicate column(s): {', '.join(duplicates)}")

    # Blank header cells (e.g. from a trailing delimiter) are ignored.
    records = [
        {name: value for name, value in zip(header, row) if name}
        for row in rows
    ]
    logger.debug(f"Parsed {len(records)} {source} rows with columns {named}")
    return records
