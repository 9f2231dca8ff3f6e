"""Configuration management."""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from .rendering.entities import DEFAULT_LINK_BASE_URL
from .timelines.merger import DEFAULT_CACHE_TTL


def _parse_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a valid integer, got '{raw}'") from e


@dataclass
class TweetkitConfig:
    """Configuration from environment variables."""

    archive_dir: str = "./archive"
    screen_names: List[str] = field(default_factory=list)
    count: int = 20
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL
    fail_on_source_error: bool = False
    fetch_timeout_seconds: Optional[float] = None
    max_workers: int = 1
    link_base_url: str = DEFAULT_LINK_BASE_URL
    output_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "TweetkitConfig":
        """Load configuration from TWEETKIT_* environment variables."""
        screen_names_str = os.getenv("TWEETKIT_SCREEN_NAMES", "")
        screen_names = [s.strip().lstrip("@") for s in screen_names_str.split(",") if s.strip()]

        timeout_str = os.getenv("TWEETKIT_FETCH_TIMEOUT_SECONDS", "")
        try:
            fetch_timeout = float(timeout_str) if timeout_str else None
        except ValueError as e:
            raise ValueError(
                f"TWEETKIT_FETCH_TIMEOUT_SECONDS must be a number, got '{timeout_str}'"
            ) from e

        return cls(
            archive_dir=os.getenv("TWEETKIT_ARCHIVE_DIR", "./archive"),
            screen_names=screen_names,
            count=_parse_int("TWEETKIT_COUNT", "20"),
            cache_ttl_seconds=_parse_int("TWEETKIT_CACHE_TTL_SECONDS", str(DEFAULT_CACHE_TTL)),
            fail_on_source_error=os.getenv("TWEETKIT_FAIL_ON_SOURCE_ERROR", "false").lower()
            == "true",
            fetch_timeout_seconds=fetch_timeout,
            max_workers=_parse_int("TWEETKIT_MAX_WORKERS", "1"),
            link_base_url=os.getenv("TWEETKIT_LINK_BASE_URL", DEFAULT_LINK_BASE_URL),
            output_file=os.getenv("TWEETKIT_OUTPUT_FILE") or None,
        )

    def validate(self) -> None:
        """Validate configuration."""
        if self.count <= 0:
            raise ValueError("TWEETKIT_COUNT must be positive")
        if self.cache_ttl_seconds < 0:
            raise ValueError("TWEETKIT_CACHE_TTL_SECONDS must not be negative")
        if self.max_workers <= 0:
            raise ValueError("TWEETKIT_MAX_WORKERS must be positive")
        if self.fetch_timeout_seconds is not None and self.fetch_timeout_seconds <= 0:
            raise ValueError("TWEETKIT_FETCH_TIMEOUT_SECONDS must be positive")
        if not self.link_base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"TWEETKIT_LINK_BASE_URL must be an http(s) URL, got '{self.link_base_url}'"
            )
