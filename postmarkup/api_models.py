from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class ApiSchemaError(ValueError):
    """Thread payload is missing required fields or has the wrong shape."""


class ApiPost(BaseModel):
    """One post as returned in `threads[0].posts` of the thread JSON."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    num: str
    parent: str = "0"
    comment: str
    subject: str = ""
    name: str = ""
    date: str = ""
    timestamp: Optional[int] = None
    op: bool = False

    @field_validator("num", "parent", mode="before")
    @classmethod
    def _number_as_string(cls, v: Any) -> Any:
        # The API has sent post numbers both as ints and as strings.
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def is_thread_start(self) -> bool:
        return self.parent in ("", "0")


class ApiThread(BaseModel):
    model_config = ConfigDict(extra="ignore")

    posts: list[dict[str, Any]]


class ThreadPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    board: Optional[str] = Field(default=None, alias="Board")
    threads: list[ApiThread] = Field(min_length=1)


def parse_thread_payload(data: Any) -> list[ApiPost]:
    """
    Validate a thread JSON payload and return its posts in API order.

    Raises:
        ApiSchemaError: the envelope (`threads[0].posts`) is missing or malformed.

    Single posts that fail validation are skipped with a warning.
    """
    try:
        payload = ThreadPayload.model_validate(data)
    except ValidationError as e:
        raise ApiSchemaError(f"Invalid thread payload: {e.error_count()} error(s)") from e

    posts: list[ApiPost] = []
    for raw in payload.threads[0].posts:
        try:
            posts.append(ApiPost.model_validate(raw))
        except ValidationError as e:
            logger.warning("Skipping malformed post: num=%s err=%s", raw.get("num"), e.errors()[0].get("msg"))
    return posts
