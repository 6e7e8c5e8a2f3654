from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from postmarkup.http_client import HttpConfig
from postmarkup.post_parser import SiteConfig


class ParserSettings(BaseSettings):
    """
    Environment-driven settings for the post parser and the thread client.
    """

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    # ---- Site ----
    site_host: str = Field(default="2ch.hk", alias="SITE_HOST")
    site_base_url: str = Field(default="https://2ch.hk", alias="SITE_BASE_URL")

    # ---- Parser ----
    # Underline markup is swept only when enabled; off matches the app's rendering.
    enable_underline: bool = Field(default=False, alias="PARSER_ENABLE_UNDERLINE")
    convert_line_break_tags: bool = Field(default=True, alias="PARSER_CONVERT_LINE_BREAK_TAGS")

    # ---- Fetching ----
    board: str = Field(default="b", alias="THREAD_BOARD")
    thread: int = Field(default=0, alias="THREAD_NUM")

    request_timeout_sec: float = Field(default=15.0, alias="REQUEST_TIMEOUT_SEC")
    request_delay_sec: float = Field(default=0.8, alias="REQUEST_DELAY_SEC")

    max_retries: int = Field(default=3, alias="REQUEST_MAX_RETRIES")
    backoff_base_sec: float = Field(default=1.0, alias="REQUEST_BACKOFF_BASE_SEC")
    backoff_max_sec: float = Field(default=20.0, alias="REQUEST_BACKOFF_MAX_SEC")

    user_agent: str = Field(default="postmarkup/0.1", alias="REQUEST_USER_AGENT")

    dump_payload_on_empty: bool = Field(default=True, alias="DUMP_PAYLOAD_ON_EMPTY")
    dump_payload_path: str = Field(default="debug_thread.json", alias="DUMP_PAYLOAD_PATH")

    def site_config(self) -> SiteConfig:
        return SiteConfig(
            host=self.site_host,
            base_url=self.site_base_url,
            enable_underline=self.enable_underline,
            convert_line_break_tags=self.convert_line_break_tags,
        )

    def http_config(self) -> HttpConfig:
        return HttpConfig(
            timeout_sec=self.request_timeout_sec,
            delay_sec=self.request_delay_sec,
            max_retries=self.max_retries,
            backoff_base_sec=self.backoff_base_sec,
            backoff_max_sec=self.backoff_max_sec,
            user_agent=self.user_agent,
        )


def load_settings() -> ParserSettings:
    return ParserSettings()
