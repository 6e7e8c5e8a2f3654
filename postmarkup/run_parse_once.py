from __future__ import annotations

import json
import logging
from pathlib import Path

from postmarkup.api_models import ApiSchemaError
from postmarkup.http_client import HttpClient
from postmarkup.post_parser import PostParser
from postmarkup.reply_graph import build_reply_map, parse_posts
from postmarkup.settings import load_settings
from postmarkup.thread_client import ThreadClient

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)

logger = logging.getLogger(__name__)


def main() -> None:
    s = load_settings()
    site = s.site_config()

    client = ThreadClient(site, HttpClient(s.http_config()))
    parser = PostParser(site)

    payload = client.fetch_thread_json(s.board, s.thread)
    try:
        posts = client.fetch_posts_from_payload(payload)
    except ApiSchemaError as e:
        logger.error("Thread payload rejected: %s", e)
        posts = []

    if not posts and s.dump_payload_on_empty:
        Path(s.dump_payload_path).write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        logger.warning("No posts parsed. Dumped payload to: %s", s.dump_payload_path)
        return

    parsed = parse_posts(posts, parser)
    replies = build_reply_map(parsed)
    logger.info("Parsed posts: %s", len(parsed))

    sample = [
        {
            "num": p.num,
            "subject": p.subject.text,
            "comment_preview": (p.comment.text[:120] + "…") if len(p.comment.text) > 120 else p.comment.text,
            "links": [
                {"board": link.board, "thread": link.thread, "post": link.post}
                for link in p.comment.links
            ],
            "replied_to": p.replied_to_posts,
            "replies": replies.get(p.num, []),
        }
        for p in parsed[:5]
    ]
    print(json.dumps(sample, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
