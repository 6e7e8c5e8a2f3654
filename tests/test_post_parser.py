from __future__ import annotations

from postmarkup.models import LinkRecord, StyleKind
from postmarkup.post_parser import PostParser, SiteConfig


def _parser(host: str = "example.com", **kwargs) -> PostParser:
    return PostParser(SiteConfig(host=host, base_url=f"https://{host}", **kwargs))


def _kinds(result) -> set[StyleKind]:
    return {s.kind for s in result.spans}


def test_quote_link_with_board_thread_and_post():
    result = _parser().parse('<a href="//example.com/b/res/123.html#456">')
    assert result.links == (LinkRecord(board="b", thread="123", post="456"),)
    assert result.replied_to_posts == ["456"]
    assert result.text == ""


def test_closed_quote_link_styles_whole_anchor_text():
    result = _parser().parse('<a href="//example.com/b/res/123.html#456">&gt;&gt;456</a>')
    assert result.text == ">>456"
    assert result.links == (LinkRecord(board="b", thread="123", post="456"),)

    [span] = result.spans
    assert span.kind is StyleKind.LINK
    assert (span.range.start, span.range.end) == (0, 5)
    assert span.url == "//example.com/b/res/123.html#456"


def test_nested_em_strong_gets_combined_style():
    result = _parser().parse("<em><strong>x</strong></em>")
    assert result.text == "x"
    [run] = result.runs
    assert run.text == "x"
    assert run.kinds == {StyleKind.EMPHASIS_STRONG}


def test_partial_em_strong_overlap_only_combines_intersection():
    result = _parser().parse("<em>a<strong>b</strong></em><strong>c</strong>")
    assert result.text == "abc"
    assert [(r.text, r.kinds) for r in result.runs] == [
        ("a", {StyleKind.EMPHASIS}),
        ("b", {StyleKind.EMPHASIS_STRONG}),
        ("c", {StyleKind.STRONG}),
    ]


def test_line_break_runs_collapse_to_two():
    assert _parser().parse("a\n\n\n\nb").text == "a\n\nb"


def test_external_link_is_styled_but_not_recorded():
    result = _parser().parse('<a href="https://other.com/page">text</a>')
    assert result.text == "text"
    assert result.links == ()
    assert result.replied_to_posts == []
    [span] = result.spans
    assert span.kind is StyleKind.LINK
    assert span.url == "https://other.com/page"


def test_ampersand_entity_decodes_once():
    assert _parser().parse("&amp;gt;").text == "&gt;"


def test_href_ampersands_are_decoded_before_url_parsing():
    result = _parser().parse('<a href="https://other.com/?a=1&amp;b=2">t</a>')
    assert result.spans[0].url == "https://other.com/?a=1&b=2"


def test_spoiler_and_quote_spans():
    result = _parser().parse('<span class="unkfunc">&gt;quote</span> <span class="spoiler">secret</span>')
    assert result.text == ">quote secret"
    assert [(r.text, r.kinds) for r in result.runs] == [
        (">quote", {StyleKind.QUOTE}),
        (" ", frozenset()),
        ("secret", {StyleKind.SPOILER}),
    ]


def test_inline_style_span_bold_and_background():
    result = _parser().parse('<span style="font-weight: bold; background-color: #ff0">hi</span>')
    assert result.text == "hi"
    assert _kinds(result) == {StyleKind.STRONG, StyleKind.BACKGROUND_TINT}


def test_inline_style_span_without_known_declarations_adds_nothing():
    result = _parser().parse('<span style="color: red">hi</span>')
    assert result.text == "hi"
    assert result.spans == ()


def test_underline_is_off_by_default():
    assert _parser().parse('<span class="u">x</span>').spans == ()


def test_underline_can_be_enabled():
    result = _parser(enable_underline=True).parse('<span class="u">x</span>')
    assert _kinds(result) == {StyleKind.UNDERLINE}


def test_line_break_tags_become_newlines():
    assert _parser().parse("a<br>b<br/>c<BR />d").text == "a\nb\nc\nd"


def test_line_break_tags_are_stripped_when_conversion_disabled():
    assert _parser(convert_line_break_tags=False).parse("a<br>b").text == "ab"


def test_style_sheet_block_is_removed():
    result = _parser().parse('<style type="text/css">.x { color: red }</style>hello')
    assert result.text == "hello"


def test_entities_decode_in_fixed_order():
    result = _parser().parse("&lt;b&gt; &quot;q&quot; a&nbsp;b &amp;nbsp;")
    assert result.text == '<b> "q" a\nb &nbsp;'


def test_links_are_recorded_in_document_order():
    text = (
        '<a href="/b/res/1.html#2" class="post-reply-link">&gt;&gt;2</a><br>'
        '<a href="/b/res/1.html#3" class="post-reply-link">&gt;&gt;3</a><br>'
        "ok"
    )
    result = _parser().parse(text)
    assert result.text == ">>2\n>>3\nok"
    assert result.replied_to_posts == ["2", "3"]
    assert [s.url for s in result.spans] == ["/b/res/1.html#2", "/b/res/1.html#3"]


def test_single_quoted_href():
    result = _parser().parse("<a href='/pr/res/77.html#78'>x</a>")
    assert result.links == (LinkRecord(board="pr", thread="77", post="78"),)


def test_bad_thread_segment_keeps_link_but_drops_record():
    result = _parser().parse('<a href="/b/res/abc.html#5">x</a>')
    assert result.links == ()
    assert result.spans[0].url == "/b/res/abc.html#5"


def test_board_only_link():
    result = _parser().parse('<a href="https://example.com/news/">/news/</a>')
    assert result.links == (LinkRecord(board="news"),)
    assert result.replied_to_posts == []


def test_anchor_without_href_is_plain_link():
    result = _parser().parse("<a name=top>x</a>")
    assert result.text == "x"
    assert result.links == ()
    assert result.spans[0].url is None


def test_unparseable_href_is_plain_link():
    result = _parser().parse('<a href="http://[::1/b">x</a>')
    assert result.links == ()
    assert result.spans[0].kind is StyleKind.LINK
    assert result.spans[0].url is None


def test_empty_and_missing_input():
    assert _parser().parse("").text == ""
    assert _parser().parse(None).links == ()


def test_malformed_markup_never_raises():
    for text in ("<<<>>>", "<a", "</a><a href=\"", "<em><strong>x</em>", "&amp", "<span style=", "\n\n\n\n\n"):
        result = _parser().parse(text)
        assert "\n\n\n" not in result.text


def test_plain_subject_passes_through():
    result = _parser().parse("Thread subject")
    assert result.text == "Thread subject"
    assert result.spans == ()
    assert [r.text for r in result.runs] == ["Thread subject"]


def test_multi_line_link_text_is_styled_as_one_link():
    result = _parser().parse('<a href="/b/res/1.html#2">x\ny</a>')
    assert result.text == "x\ny"
    assert result.links == (LinkRecord(board="b", thread="1", post="2"),)
    [run] = result.runs
    assert run.text == "x\ny"
    assert run.kinds == {StyleKind.LINK}
    assert run.url == "/b/res/1.html#2"


def test_tags_starting_with_a_are_not_anchors():
    result = _parser().parse('<area href="/b/res/1.html#9"> hi <abbr title="x">y</abbr>')
    assert result.text == " hi y"
    assert result.links == ()
    assert result.spans == ()


def test_unclosed_anchor_before_closed_one_is_part_of_its_match():
    result = _parser().parse('<a href="/b/res/1.html#2">x <a href="/b/res/1.html#3">y</a>')
    assert result.text == "x y"
    assert result.replied_to_posts == ["2"]


def test_span_text_does_not_count_as_style_declaration():
    result = _parser().parse('<span style="color: red">background-color: x; font-weight: bold</span>')
    assert result.text == "background-color: x; font-weight: bold"
    assert result.spans == ()
