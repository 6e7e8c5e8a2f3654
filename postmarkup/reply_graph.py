from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from postmarkup.api_models import ApiPost
from postmarkup.models import ParseResult
from postmarkup.post_parser import PostParser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedPost:
    num: str
    subject: ParseResult
    comment: ParseResult

    @property
    def replied_to_posts(self) -> list[str]:
        return self.comment.replied_to_posts


def parse_posts(posts: Sequence[ApiPost], parser: PostParser) -> list[ParsedPost]:
    """
    Parse subject and comment of every post.

    - Does not mutate input posts
    - Keeps ordering
    """
    return [
        ParsedPost(
            num=post.num,
            subject=parser.parse(post.subject),
            comment=parser.parse(post.comment),
        )
        for post in posts
    ]


def build_reply_map(parsed: Sequence[ParsedPost]) -> dict[str, list[str]]:
    """
    Post number -> numbers of the posts quoting it, in thread order.

    Quotes of posts outside the given list are ignored, as are self-quotes
    and repeated quotes from the same post.
    """
    replies: dict[str, list[str]] = {p.num: [] for p in parsed}
    for post in parsed:
        for target in post.replied_to_posts:
            if target == post.num or target not in replies:
                continue
            if post.num not in replies[target]:
                replies[target].append(post.num)

    logger.debug("Built reply map: posts=%s quoted=%s", len(replies), sum(1 for v in replies.values() if v))
    return replies
