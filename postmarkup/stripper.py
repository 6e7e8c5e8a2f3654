from __future__ import annotations

import re
from typing import Iterable

from postmarkup.models import TextRange
from postmarkup.rich_buffer import RichBuffer

# Ampersand goes last: "&amp;gt;" must end up as "&gt;", not ">".
# The site writes &nbsp; where it means a line break.
ENTITY_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("&gt;", ">"),
    ("&lt;", "<"),
    ("&quot;", '"'),
    ("&nbsp;", "\n"),
    ("&amp;", "&"),
)

TRIPLE_LINE_BREAK = "\n\n\n"
DOUBLE_LINE_BREAK = "\n\n"


def merge_ranges(ranges: Iterable[TextRange]) -> list[TextRange]:
    """Ascending by start, overlapping ranges joined into one."""
    merged: list[TextRange] = []
    for rng in sorted((r for r in ranges if not r.is_empty), key=lambda r: r.start):
        if merged and rng.start < merged[-1].end:
            last = merged.pop()
            rng = TextRange.between(last.start, max(last.end, rng.end))
        merged.append(rng)
    return merged


def strip_ranges(buffer: RichBuffer, ranges: Iterable[TextRange]) -> int:
    return buffer.delete_ranges(merge_ranges(ranges))


def decode_entities(buffer: RichBuffer) -> None:
    for entity, replacement in ENTITY_REPLACEMENTS:
        buffer.replace_all(re.escape(entity), replacement, re.IGNORECASE)


def collapse_line_breaks(buffer: RichBuffer) -> None:
    while buffer.replace_all(TRIPLE_LINE_BREAK, DOUBLE_LINE_BREAK):
        pass


def strip_and_normalize(buffer: RichBuffer, ranges: Iterable[TextRange]) -> None:
    strip_ranges(buffer, ranges)
    decode_entities(buffer)
    collapse_line_breaks(buffer)
