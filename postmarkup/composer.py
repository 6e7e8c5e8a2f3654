from __future__ import annotations

from typing import Iterable, Sequence

from postmarkup.models import StyleKind, TextRange
from postmarkup.rich_buffer import RichBuffer

SPAN_BOLD_DECLARATION = "font-weight: bold"
SPAN_BACKGROUND_DECLARATION = "background-color:"


def apply_styles(buffer: RichBuffer, ranges: Iterable[TextRange], kind: StyleKind) -> None:
    for rng in ranges:
        buffer.add_style(rng, kind)


def combined_ranges(emphasis: Sequence[TextRange], strong: Sequence[TextRange]) -> list[TextRange]:
    """Non-empty pairwise intersections, ordered by position."""
    out = {
        em.intersection(st)
        for em in emphasis
        for st in strong
    }
    return sorted((r for r in out if not r.is_empty), key=lambda r: (r.start, r.length))


def apply_emphasis_and_strong(
        buffer: RichBuffer,
        emphasis: Sequence[TextRange],
        strong: Sequence[TextRange],
) -> None:
    # Combined goes last so it wins the font channel on the overlap.
    apply_styles(buffer, emphasis, StyleKind.EMPHASIS)
    apply_styles(buffer, strong, StyleKind.STRONG)
    apply_styles(buffer, combined_ranges(emphasis, strong), StyleKind.EMPHASIS_STRONG)


def apply_span_styles(buffer: RichBuffer, ranges: Iterable[TextRange]) -> None:
    """Inline `style="..."` spans: bold weight and background tint, either or both."""
    for rng in ranges:
        # Only the open tag's attributes count, never the span's text.
        attributes = buffer.substring(rng).split(">", 1)[0]
        if SPAN_BOLD_DECLARATION in attributes:
            buffer.add_style(rng, StyleKind.STRONG)
        if SPAN_BACKGROUND_DECLARATION in attributes:
            buffer.add_style(rng, StyleKind.BACKGROUND_TINT)
