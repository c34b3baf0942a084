"""Kindle export parsers.

Turns pasted or uploaded highlight exports into ``KindleHighlight`` records.
Two formats are understood:

- CSV lines of ``text,author,source,page`` (the format shown on the import
  form; only ``text`` is required)
- Kindle's ``My Clippings.txt``, where entries are separated by ``==========``

Highlight IDs are derived from the highlight content, so importing the same
export twice produces the same IDs and the importer can skip the repeats.
"""

import csv
import hashlib
import io
import re
from typing import Optional

from .schemas import KindleHighlight

CLIPPING_SEPARATOR = "=========="

_TITLE_AUTHOR = re.compile(r"^(?P<title>.*?)\s*\((?P<author>[^()]*)\)\s*$")
_PAGE = re.compile(r"\bpage\s+(?P<page>\d+)", re.IGNORECASE)
_LOCATION = re.compile(r"\b(?:location|loc\.)\s+(?P<loc>[\d-]+)", re.IGNORECASE)
_KIND = re.compile(r"^-\s*(?:your\s+)?(?P<kind>highlight|note|bookmark|clip)", re.IGNORECASE)


class ParseError(Exception):
    """Export text could not be turned into highlights."""

    pass


def make_highlight_id(text: str, source: Optional[str] = None, position: Optional[str] = None) -> str:
    """Build a stable dedup key for a highlight."""
    digest = hashlib.sha1(
        "|".join([source or "", position or "", text.strip()]).encode("utf-8")
    ).hexdigest()
    return f"kindle-{digest}"


def _parse_int(value: str) -> Optional[int]:
    value = value.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_csv_highlights(content: str) -> list[KindleHighlight]:
    """Parse ``text,author,source,page`` lines.

    Blank lines and rows without text are ignored. Fields may be quoted to
    contain commas.
    """
    highlights = []
    reader = csv.reader(io.StringIO(content.lstrip("\ufeff")))

    for row in reader:
        if not row:
            continue
        fields = [field.strip() for field in row] + [""] * 3
        text, author, source, page = fields[:4]
        if not text:
            continue

        page_number = _parse_int(page)
        highlights.append(
            KindleHighlight(
                text=text,
                author=author or None,
                source=source or None,
                page_number=page_number,
                kindle_highlight_id=make_highlight_id(
                    text, source, str(page_number) if page_number is not None else None
                ),
            )
        )

    return highlights


def _parse_clipping(block: str) -> Optional[KindleHighlight]:
    """Parse one ``My Clippings.txt`` entry; None for notes and bookmarks."""
    lines = [line.strip() for line in block.replace("\ufeff", "").strip().splitlines()]
    if len(lines) < 2:
        return None

    header, meta = lines[0], lines[1]
    kind = _KIND.match(meta)
    if not kind or kind.group("kind").lower() != "highlight":
        return None

    text = "\n".join(line for line in lines[2:] if line).strip()
    if not text:
        return None

    match = _TITLE_AUTHOR.match(header)
    if match:
        source = match.group("title").strip() or None
        author = match.group("author").strip() or None
    else:
        source, author = header or None, None

    page = _PAGE.search(meta)
    location = _LOCATION.search(meta)
    page_number = int(page.group("page")) if page else None
    position = location.group("loc") if location else (str(page_number) if page_number else None)

    return KindleHighlight(
        text=text,
        source=source,
        author=author,
        page_number=page_number,
        kindle_highlight_id=make_highlight_id(text, source, position),
    )


def parse_clippings(content: str) -> list[KindleHighlight]:
    """Parse Kindle ``My Clippings.txt`` content, keeping highlights only."""
    highlights = []
    for block in content.split(CLIPPING_SEPARATOR):
        highlight = _parse_clipping(block)
        if highlight:
            highlights.append(highlight)
    return highlights


def parse_export(content: str) -> list[KindleHighlight]:
    """Parse an export, detecting the format.

    Raises:
        ParseError: If no highlights could be found
    """
    if CLIPPING_SEPARATOR in content:
        highlights = parse_clippings(content)
    else:
        highlights = parse_csv_highlights(content)

    if not highlights:
        raise ParseError("No valid highlights found in the provided text")
    return highlights
