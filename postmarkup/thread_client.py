from __future__ import annotations

import logging
import re
from typing import Any

from postmarkup.api_models import ApiPost, parse_thread_payload
from postmarkup.http_client import HttpClient
from postmarkup.post_parser import SiteConfig

logger = logging.getLogger(__name__)


class ThreadClient:
    """
    Fetches thread JSON from the imageboard API.

    Scope:
    - Thread page: <base_url>/<board>/res/<thread>.json

    Only supplies raw `comment`/`subject` strings; parsing happens elsewhere.
    """

    BOARD_RE = re.compile(r"^[A-Za-z0-9]+$")

    def __init__(self, site: SiteConfig, http: HttpClient):
        self.base_url = site.base_url.rstrip("/")
        self.http = http

    def thread_url(self, board: str, thread: int | str) -> str:
        if not self.BOARD_RE.match(board):
            raise ValueError(f"Invalid board identifier: {board!r}")
        if not str(thread).isdigit():
            raise ValueError(f"Invalid thread number: {thread!r}")
        return f"{self.base_url}/{board}/res/{thread}.json"

    def fetch_thread_json(self, board: str, thread: int | str) -> Any:
        """Fetch the raw payload (useful for debugging API changes)."""
        url = self.thread_url(board, thread)
        logger.info("Fetching thread: url=%s", url)
        return self.http.get_json(url)

    def fetch_posts(self, board: str, thread: int | str) -> list[ApiPost]:
        """
        Raises:
            requests.RequestException / HTTPError: on persistent HTTP failures.
            ApiSchemaError: if the payload envelope is malformed.
        """
        posts = self.fetch_posts_from_payload(self.fetch_thread_json(board, thread))
        logger.info("Fetched posts: board=%s thread=%s count=%s", board, thread, len(posts))
        return posts

    def fetch_posts_from_payload(self, payload: Any) -> list[ApiPost]:
        return parse_thread_payload(payload)
