from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class StyleChannel(str, Enum):
    """Rendering attribute a style occupies. One style per channel wins."""

    FONT = "font"
    BACKGROUND = "background"
    DECORATION = "decoration"
    FOREGROUND = "foreground"


class StyleKind(str, Enum):
    EMPHASIS = "emphasis"
    STRONG = "strong"
    EMPHASIS_STRONG = "emphasis_strong"
    BACKGROUND_TINT = "background_tint"
    UNDERLINE = "underline"
    SPOILER = "spoiler"
    QUOTE = "quote"
    LINK = "link"

    @property
    def channel(self) -> StyleChannel:
        return _CHANNELS[self]


_CHANNELS = {
    StyleKind.EMPHASIS: StyleChannel.FONT,
    StyleKind.STRONG: StyleChannel.FONT,
    StyleKind.EMPHASIS_STRONG: StyleChannel.FONT,
    StyleKind.BACKGROUND_TINT: StyleChannel.BACKGROUND,
    StyleKind.UNDERLINE: StyleChannel.DECORATION,
    StyleKind.SPOILER: StyleChannel.FOREGROUND,
    StyleKind.QUOTE: StyleChannel.FOREGROUND,
    StyleKind.LINK: StyleChannel.FOREGROUND,
}


@dataclass(frozen=True)
class TextRange:
    """Half-open range [start, start + length) in buffer coordinates."""

    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def is_empty(self) -> bool:
        return self.length <= 0

    def intersection(self, other: TextRange) -> TextRange:
        start = max(self.start, other.start)
        end = min(self.end, other.end)
        if end <= start:
            return TextRange(start, 0)
        return TextRange(start, end - start)

    def shifted(self, delta: int) -> TextRange:
        return TextRange(self.start + delta, self.length)

    @classmethod
    def between(cls, start: int, end: int) -> TextRange:
        return cls(start, max(end - start, 0))


@dataclass(frozen=True)
class StyleSpan:
    range: TextRange
    kind: StyleKind
    url: Optional[str] = None


@dataclass(frozen=True)
class StyledRun:
    """Maximal stretch of text sharing the same effective styles."""

    range: TextRange
    text: str
    styles: tuple[StyleSpan, ...]

    @property
    def kinds(self) -> frozenset[StyleKind]:
        return frozenset(s.kind for s in self.styles)

    @property
    def url(self) -> Optional[str]:
        for s in self.styles:
            if s.kind is StyleKind.LINK:
                return s.url
        return None


@dataclass(frozen=True)
class LinkRecord:
    """Board/thread/post reference parsed from an internal link. Board None means current board."""

    board: Optional[str] = None
    thread: Optional[str] = None
    post: Optional[str] = None


@dataclass(frozen=True)
class ParseResult:
    """Final display text, its annotations and the quote-links found in it."""

    text: str
    spans: tuple[StyleSpan, ...] = ()
    links: tuple[LinkRecord, ...] = ()
    runs: tuple[StyledRun, ...] = field(default=(), compare=False, repr=False)

    @property
    def replied_to_posts(self) -> list[str]:
        return [link.post for link in self.links if link.post is not None]
