"""Shared test fixtures and utilities."""

from datetime import datetime, timedelta, timezone
from typing import Optional
from unittest.mock import MagicMock

import pytest

from tweetkit.models.tweet import Tweet
from tweetkit.sources.base import TweetSource

BASE_TIME = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def create_tweet(
    tweet_id: str,
    screen_name: str,
    minutes: int,
    text: str = "hello",
    entities: Optional[dict] = None,
) -> Tweet:
    """Helper to create a tweet posted `minutes` after BASE_TIME.

    Args:
        tweet_id: Tweet id
        screen_name: Author handle
        minutes: Offset from BASE_TIME in minutes
        text: Tweet text
        entities: Raw entities mapping

    Returns:
        Tweet object
    """
    return Tweet(
        tweet_id=tweet_id,
        screen_name=screen_name,
        text=text,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        entities=entities,
    )


def create_status(tweet_id: int, screen_name: str, created_at: str, text: str = "hi") -> dict:
    """Helper to create a raw API v1.1 status object."""
    return {
        "id": tweet_id,
        "id_str": str(tweet_id),
        "created_at": created_at,
        "text": text,
        "user": {"id": 42, "id_str": "42", "screen_name": screen_name, "name": screen_name.title()},
        "entities": {"hashtags": [], "urls": [], "user_mentions": []},
    }


@pytest.fixture
def hello_entities():
    """Entities for the text "Hello #world from @bob"."""
    return {
        "hashtags": [{"text": "world", "indices": [6, 12]}],
        "urls": [],
        "user_mentions": [
            {"screen_name": "bob", "name": "Bob Smith", "id_str": "7", "indices": [18, 22]}
        ],
    }


@pytest.fixture
def mock_source():
    """Create a mock tweet source."""
    return MagicMock(spec=TweetSource)


@pytest.fixture
def mock_cache():
    """Create a mock cache store that always misses."""
    cache = MagicMock()
    cache.get.return_value = None
    return cache
