from __future__ import annotations

import re

from hypothesis import assume, given
from hypothesis import strategies as st

from postmarkup.models import TextRange
from postmarkup.post_parser import PostParser, SiteConfig
from postmarkup.rich_buffer import RichBuffer
from postmarkup.rules import LEFTOVER_TAG, STYLE_SHEET, Recognizer
from postmarkup.stripper import collapse_line_breaks, decode_entities, merge_ranges, strip_and_normalize


def _normalized(text: str) -> str:
    buf = RichBuffer(text)
    strip_and_normalize(buf, [])
    return buf.text


@given(st.text(alphabet="ab \n", max_size=60))
def test_stripping_is_idempotent_on_plain_text_without_tags_or_entities(text):
    once = _normalized(text)
    assert _normalized(once) == once


@given(st.text(alphabet="a\n", max_size=80))
def test_line_break_collapse_reaches_fixed_point(text):
    buf = RichBuffer(text)
    collapse_line_breaks(buf)
    assert "\n\n\n" not in buf.text
    assert buf.text.replace("\n", "") == text.replace("\n", "")


def test_collapse_chained_runs():
    buf = RichBuffer("a" + "\n" * 7 + "b\n\n\nc")
    collapse_line_breaks(buf)
    assert buf.text == "a\n\nb\n\nc"


def test_merge_ranges_joins_overlaps_and_sorts():
    merged = merge_ranges([TextRange(10, 5), TextRange(0, 23), TextRange(30, 8), TextRange(5, 0)])
    assert merged == [TextRange(0, 23), TextRange(30, 8)]


def test_merge_ranges_keeps_adjacent_ranges_apart():
    assert merge_ranges([TextRange(4, 8), TextRange(0, 4)]) == [TextRange(0, 4), TextRange(4, 8)]


def test_decode_entities_is_case_insensitive_and_single_pass():
    buf = RichBuffer("&GT;&Lt; &amp;lt; &AMP;quot;")
    decode_entities(buf)
    assert buf.text == '>< &lt; &quot;'


def test_nbsp_becomes_line_break():
    buf = RichBuffer("&gt;quote&nbsp;reply")
    decode_entities(buf)
    assert buf.text == ">quote\nreply"


LEFTOVER_MARKUP_RE = re.compile(r"<[^>]*>|&(?:gt|lt|quot|nbsp|amp);", re.IGNORECASE)

comment_tokens = st.sampled_from(
    ["a", "b", " ", "\n", "&gt;", "&lt;", "&quot;", "&nbsp;", "&amp;", "<br>", "<em>x</em>", '<span class="spoiler">s</span>']
)


@given(st.lists(comment_tokens, max_size=15))
def test_restripping_parser_output_without_tags_or_entities_changes_nothing(tokens):
    result = PostParser(SiteConfig(host="example.com", base_url="https://example.com")).parse("".join(tokens))
    assume(not LEFTOVER_MARKUP_RE.search(result.text))

    recognizer = Recognizer()
    buf = RichBuffer(result.text)
    strip_and_normalize(
        buf,
        recognizer.find_ranges(LEFTOVER_TAG, buf.text) + recognizer.find_ranges(STYLE_SHEET, buf.text),
    )
    assert buf.text == result.text
