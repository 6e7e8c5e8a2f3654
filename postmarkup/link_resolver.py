from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import SplitResult, urlsplit

from postmarkup.models import LinkRecord

logger = logging.getLogger(__name__)

HREF_DOUBLE_QUOTED_RE = re.compile(r'href="(.*?)"', re.IGNORECASE)
HREF_SINGLE_QUOTED_RE = re.compile(r"href='(.*?)'", re.IGNORECASE)
AMP_ENTITY_RE = re.compile(r"&amp;", re.IGNORECASE)

BOARD_RE = re.compile(r"[A-Za-z]+")
THREAD_RE = re.compile(r"[0-9]+\.html")
POST_RE = re.compile(r"[0-9]+")
THREAD_SUFFIX = ".html"

_UNSAFE_URL_CHARS_RE = re.compile(r"[\s\x00-\x1f\x7f]")


@dataclass(frozen=True)
class ResolvedLink:
    """What one anchor resolved to. `url` None means a plain link without target."""

    url: Optional[str] = None
    record: Optional[LinkRecord] = None


def strip_www(host: str) -> str:
    return host[4:] if host.startswith("www.") else host


def extract_href(anchor_markup: str) -> Optional[str]:
    """Href value of the opening tag: double quotes first, single quotes as fallback."""
    open_tag = anchor_markup.split(">", 1)[0]
    m = HREF_DOUBLE_QUOTED_RE.search(open_tag) or HREF_SINGLE_QUOTED_RE.search(open_tag)
    if not m or not m.group(1):
        return None
    return m.group(1)


def decode_ampersands(value: str) -> str:
    return AMP_ENTITY_RE.sub("&", value)


def build_url(value: str) -> Optional[SplitResult]:
    if not value or _UNSAFE_URL_CHARS_RE.search(value):
        return None
    try:
        parts = urlsplit(value)
        # Port parsing is lazy in urllib; force it so bad ports count as unparseable.
        parts.port
    except ValueError:
        return None
    return parts


def raw_host(parts: SplitResult) -> str:
    """Host as written (case kept), without userinfo and port."""
    netloc = parts.netloc.rsplit("@", 1)[-1]
    if netloc.startswith("["):
        return netloc.split("]", 1)[0] + "]"
    return netloc.split(":", 1)[0]


def is_internal(parts: SplitResult, site_host: str) -> bool:
    host = raw_host(parts)
    if not host:
        return True
    return strip_www(host) == strip_www(site_host)


def parse_link_record(parts: SplitResult) -> Optional[LinkRecord]:
    """
    Board/thread/post out of an internal URL.

    Path: /<board>/res/<thread>.html, fragment: #<post>. A component that is
    present but has the wrong shape rejects the whole URL.
    """
    segments = [s for s in parts.path.split("/") if s]

    board = None
    if len(segments) > 0:
        if not BOARD_RE.fullmatch(segments[0]):
            return None
        board = segments[0]

    thread = None
    if len(segments) > 2:
        if not THREAD_RE.fullmatch(segments[2]):
            return None
        thread = segments[2][: -len(THREAD_SUFFIX)]

    post = None
    if parts.fragment:
        if not POST_RE.fullmatch(parts.fragment):
            return None
        post = parts.fragment

    if board is None and thread is None and post is None and raw_host(parts):
        return None

    return LinkRecord(board=board, thread=thread, post=post)


class LinkResolver:
    def __init__(self, site_host: str):
        self.site_host = site_host

    def resolve(self, anchor_markup: str) -> ResolvedLink:
        href = extract_href(anchor_markup)
        if href is None:
            return ResolvedLink()

        url = decode_ampersands(href)
        parts = build_url(url)
        if parts is None:
            logger.debug("Unparseable href, styling as plain link: href=%r", href)
            return ResolvedLink()

        if not is_internal(parts, self.site_host):
            return ResolvedLink(url=url)

        return ResolvedLink(url=url, record=parse_link_record(parts))
