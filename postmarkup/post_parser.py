from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from postmarkup import composer, rules
from postmarkup.link_resolver import LinkResolver
from postmarkup.models import LinkRecord, ParseResult, StyleKind
from postmarkup.rich_buffer import RichBuffer
from postmarkup.rules import Recognizer
from postmarkup.stripper import strip_and_normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SiteConfig:
    host: str
    base_url: str
    enable_underline: bool = False
    convert_line_break_tags: bool = True


class PostParser:
    """
    Turns a raw `comment`/`subject` body into display text, styles and quote-links.

    Stages:
    1) discovery: every rule swept over the unmodified text (read-only)
    2) styles and links attached to the discovered ranges (length unchanged)
    3) one shift-aware deletion of leftover tags and style sheets,
       then entity decoding and line-break collapsing

    Holds only immutable config; `parse` can be called from any thread.
    """

    def __init__(self, site: SiteConfig, recognizer: Optional[Recognizer] = None):
        self.site = site
        self._recognizer = recognizer or Recognizer()
        self._links = LinkResolver(site.host)

    def parse(self, text: Optional[str]) -> ParseResult:
        if not text:
            return ParseResult(text="")

        if self.site.convert_line_break_tags:
            text = rules.LINE_BREAK_TAG_RE.sub("\n", text)

        buffer = RichBuffer(text)
        skip = () if self.site.enable_underline else (rules.UNDERLINE.name,)
        found = self._recognizer.discover(buffer.text, skip=skip)

        composer.apply_span_styles(buffer, found[rules.SPAN_STYLE.name])
        composer.apply_emphasis_and_strong(buffer, found[rules.EMPHASIS.name], found[rules.STRONG.name])
        composer.apply_styles(buffer, found[rules.UNDERLINE.name], StyleKind.UNDERLINE)
        composer.apply_styles(buffer, found[rules.SPOILER.name], StyleKind.SPOILER)
        composer.apply_styles(buffer, found[rules.QUOTE.name], StyleKind.QUOTE)

        records: list[LinkRecord] = []
        for rng in found[rules.ANCHOR.name]:
            resolved = self._links.resolve(buffer.substring(rng))
            buffer.add_style(rng, StyleKind.LINK, resolved.url)
            if resolved.record is not None:
                records.append(resolved.record)

        strip_and_normalize(
            buffer,
            found[rules.LEFTOVER_TAG.name] + found[rules.STYLE_SHEET.name],
        )

        logger.debug(
            "Parsed post markup: in_len=%s out_len=%s spans=%s links=%s",
            len(text),
            len(buffer),
            len(buffer.spans),
            len(records),
        )
        return ParseResult(
            text=buffer.text,
            spans=buffer.spans,
            links=tuple(records),
            runs=buffer.runs(),
        )
