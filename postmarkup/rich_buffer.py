from __future__ import annotations

import re
from typing import Iterable, Optional, Union

from postmarkup.models import StyleChannel, StyledRun, StyleKind, StyleSpan, TextRange


class RichBuffer:
    """
    Mutable text with style annotations kept in the current coordinate space.

    Every length-changing edit goes through `replace`, which re-expresses all
    annotations after the edit:
    - spans ending at or before the edit are untouched
    - spans starting at or after the edit are shifted by the length delta
    - overlapping spans are clipped to (or extended over) the replacement
    - spans left empty are dropped
    """

    def __init__(self, text: str = ""):
        self._text = text
        self._spans: list[StyleSpan] = []

    @property
    def text(self) -> str:
        return self._text

    @property
    def spans(self) -> tuple[StyleSpan, ...]:
        return tuple(self._spans)

    def __len__(self) -> int:
        return len(self._text)

    def substring(self, rng: TextRange) -> str:
        return self._text[rng.start:rng.end]

    def add_style(self, rng: TextRange, kind: StyleKind, url: Optional[str] = None) -> None:
        clipped = rng.intersection(TextRange(0, len(self._text)))
        if clipped.is_empty:
            return
        self._spans.append(StyleSpan(clipped, kind, url))

    # -------------------------
    # Editing
    # -------------------------

    def replace(self, rng: TextRange, new_text: str) -> None:
        a, b = rng.start, rng.end
        n = len(new_text)
        delta = n - (b - a)
        self._text = self._text[:a] + new_text + self._text[b:]

        kept: list[StyleSpan] = []
        for span in self._spans:
            s, e = span.range.start, span.range.end
            if e <= a:
                kept.append(span)
                continue
            new_s = s if s <= a else (s + delta if s >= b else a)
            new_e = e + delta if e >= b else a + n
            if new_e <= new_s:
                continue
            kept.append(StyleSpan(TextRange.between(new_s, new_e), span.kind, span.url))
        self._spans = kept

    def delete_ranges(self, ranges: Iterable[TextRange]) -> int:
        """
        Delete non-overlapping ranges given in original coordinates, ascending.

        Each range is moved left by the number of characters already removed
        before it is deleted. Returns the total number of removed characters.
        """
        shift = 0
        for rng in ranges:
            if rng.is_empty:
                continue
            self.replace(rng.shifted(-shift), "")
            shift += rng.length
        return shift

    def replace_all(self, pattern: Union[str, re.Pattern[str]], replacement: str, flags: int = 0) -> int:
        """Replace every match with a literal string, left to right. Returns the match count."""
        regex = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern, flags)
        matches = [TextRange.between(m.start(), m.end()) for m in regex.finditer(self._text)]
        shift = 0
        for rng in matches:
            self.replace(rng.shifted(shift), replacement)
            shift += len(replacement) - rng.length
        return len(matches)

    # -------------------------
    # Queries
    # -------------------------

    def styles_at(self, pos: int) -> dict[StyleChannel, StyleSpan]:
        out: dict[StyleChannel, StyleSpan] = {}
        for span in self._spans:
            if span.range.start <= pos < span.range.end:
                out[span.kind.channel] = span
        return out

    def dominant_kind_at(self, pos: int, channel: StyleChannel = StyleChannel.FONT) -> Optional[StyleKind]:
        span = self.styles_at(pos).get(channel)
        return span.kind if span else None

    def runs(self) -> tuple[StyledRun, ...]:
        if not self._text:
            return ()

        bounds = {0, len(self._text)}
        for span in self._spans:
            bounds.add(span.range.start)
            bounds.add(span.range.end)
        points = sorted(bounds)

        runs: list[StyledRun] = []
        for start, end in zip(points, points[1:]):
            styles = tuple(sorted(self.styles_at(start).values(), key=lambda s: s.kind.channel.value))
            if runs and runs[-1].styles == styles:
                prev = runs.pop()
                start = prev.range.start
            rng = TextRange.between(start, end)
            runs.append(StyledRun(rng, self.substring(rng), styles))
        return tuple(runs)
