from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from postmarkup.models import TextRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkupRule:
    """One independent sweep over the text. Matches always cover the whole tag expression."""

    name: str
    pattern: str
    flags: int = re.IGNORECASE

    def compile(self) -> Optional[re.Pattern[str]]:
        try:
            return re.compile(self.pattern, self.flags)
        except re.error as e:
            logger.error("Markup rule does not compile, it will match nothing: rule=%s err=%s", self.name, e)
            return None


SPAN_STYLE = MarkupRule("span_style", r"<span (.*?)>(.*?)</span>")
EMPHASIS = MarkupRule("emphasis", r"<em[^>]*>(.*?)</em>")
STRONG = MarkupRule("strong", r"<strong[^>]*>(.*?)</strong>")
# Known to misfire on real comments; only swept when explicitly enabled.
UNDERLINE = MarkupRule("underline", r'<span class="u">(.*?)</span>')
SPOILER = MarkupRule("spoiler", r'<span class="spoiler">(.*?)</span>')
QUOTE = MarkupRule("quote", r'<span class="unkfunc">(.*?)</span>')
# Link text may span line breaks. An open tag with no </a> anywhere after it
# still resolves its href; the match is then just the open tag.
ANCHOR = MarkupRule("anchor", r"<a\b[^>]*>(?:([\s\S]*?)</a>|(?![\s\S]*</a>))")
LEFTOVER_TAG = MarkupRule("leftover_tag", r"<[^>]*>")
STYLE_SHEET = MarkupRule("style_sheet", r'<style type="text/css">(.+?)</style>')

RULES: tuple[MarkupRule, ...] = (
    SPAN_STYLE,
    EMPHASIS,
    STRONG,
    UNDERLINE,
    SPOILER,
    QUOTE,
    ANCHOR,
    LEFTOVER_TAG,
    STYLE_SHEET,
)

LINE_BREAK_TAG_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)


class Recognizer:
    """Compiles a rule table once and runs each rule as its own left-to-right sweep."""

    def __init__(self, rules: Iterable[MarkupRule] = RULES):
        self._rules = tuple(rules)
        self._compiled = {rule.name: rule.compile() for rule in self._rules}

    @property
    def rules(self) -> tuple[MarkupRule, ...]:
        return self._rules

    def find_ranges(self, rule: MarkupRule, text: str) -> tuple[TextRange, ...]:
        regex = self._compiled.get(rule.name)
        if regex is None:
            return ()
        return tuple(TextRange.between(m.start(), m.end()) for m in regex.finditer(text))

    def discover(self, text: str, skip: Iterable[str] = ()) -> Mapping[str, tuple[TextRange, ...]]:
        """Read-only pass: rule name -> match ranges, for every rule in table order."""
        skipped = set(skip)
        found = {
            rule.name: (() if rule.name in skipped else self.find_ranges(rule, text))
            for rule in self._rules
        }
        return MappingProxyType(found)
