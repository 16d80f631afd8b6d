"""
CSV parser — quoted-field aware parsing of uploaded CSV files.

Descriptions, tags and features routinely contain commas, so fields are
split by a single-pass scanner that tracks whether it is inside quotes.
Header cells are case-folded with all whitespace removed so that
"Folder Path", "folderPath" and "folderpath" all map to "folderpath".
"""
import logging
import re
from typing import Dict, List, Union

from listing_hub.core.exceptions import EmptyInputError

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_LINE_BREAK = re.compile(r"\r?\n")


def normalize_header(header: str) -> str:
    return _WHITESPACE.sub("", header).casefold()


def parse_csv_line(line: str) -> List[str]:
    """Split one CSV line into trimmed fields.

    A doubled quote inside a quoted field is a literal quote.
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    fields.append("".join(current).strip())
    return fields


def parse_csv(raw: Union[str, bytes]) -> List[Dict[str, str]]:
    """Parse CSV text into row mappings keyed by normalized header.

    Bytes are decoded as UTF-8; undecodable bytes become U+FFFD. Only
    `\\n` and `\\r\\n` end a line.

    Raises:
        EmptyInputError: fewer than two non-blank lines (header + one row).
    """
    if isinstance(raw, bytes):
        text = raw.decode("utf-8-sig", errors="replace")
    else:
        text = raw.lstrip("\ufeff")
    lines = [line for line in _LINE_BREAK.split(text) if line.strip()]
    if len(lines) < 2:
        raise EmptyInputError()

    headers = [normalize_header(h) for h in parse_csv_line(lines[0])]
    rows: List[Dict[str, str]] = []
    for line in lines[1:]:
        values = parse_csv_line(line)
        row = {
            header: values[index] if index < len(values) else ""
            for index, header in enumerate(headers)
        }
        logger.debug("csv parsed row=%s", row)
        rows.append(row)

    logger.info(f"Parsed {len(rows)} rows from CSV (headers={headers})")
    return rows
