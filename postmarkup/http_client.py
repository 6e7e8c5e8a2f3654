from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpConfig:
    timeout_sec: float
    delay_sec: float
    max_retries: int
    backoff_base_sec: float
    backoff_max_sec: float
    user_agent: str


class HttpClient:
    """
    Thin JSON-over-HTTP wrapper for the imageboard API:
    - Timeout
    - Rate limiting (fixed delay + small jitter)
    - Retry with exponential backoff on transport errors and 403/429/5xx
    """

    RETRY_STATUSES = (403, 429, 500, 502, 503, 504)

    def __init__(self, config: HttpConfig, session: Optional[requests.Session] = None):
        self._cfg = config
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "User-Agent": self._cfg.user_agent,
                "Accept": "application/json",
            }
        )

    def get_json(self, url: str) -> Any:
        """
        GET an URL and decode the JSON body.

        Raises:
            requests.HTTPError: non-2xx responses after retries
            requests.RequestException: network errors after retries
            requests.JSONDecodeError: body is not JSON (also a ValueError)
        """
        self._rate_limit()

        for attempt in range(self._cfg.max_retries + 1):
            try:
                resp = self._session.get(url, timeout=self._cfg.timeout_sec)
                if resp.status_code in self.RETRY_STATUSES:
                    raise requests.HTTPError(
                        f"Retryable status: status={resp.status_code} url={url}",
                        response=resp,
                    )
                resp.raise_for_status()
                return resp.json()
            except requests.RequestException as e:
                if attempt >= self._cfg.max_retries:
                    logger.error("HTTP GET failed after retries: url=%s err=%s", url, e)
                    raise
                sleep_sec = self._compute_backoff(attempt)
                logger.warning(
                    "HTTP GET failed (retrying): attempt=%s url=%s sleep=%.2fs err=%s",
                    attempt + 1,
                    url,
                    sleep_sec,
                    e,
                )
                time.sleep(sleep_sec)

        raise AssertionError("unreachable")

    def _rate_limit(self) -> None:
        if self._cfg.delay_sec <= 0:
            return
        time.sleep(self._cfg.delay_sec + random.uniform(0.0, 0.25))

    def _compute_backoff(self, attempt: int) -> float:
        base = self._cfg.backoff_base_sec * (2**attempt)
        capped = min(base, self._cfg.backoff_max_sec)
        return capped + random.uniform(0.0, 0.5)
