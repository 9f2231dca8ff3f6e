"""Canonical tweet model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Tweet:
    """Twitter/X status as returned by a tweet source."""

    tweet_id: str
    screen_name: str
    text: str
    created_at: datetime
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    url: Optional[str] = None
    source: Optional[str] = None
    lang: Optional[str] = None
    retweet_count: int = 0
    favorite_count: int = 0
    in_reply_to_status_id: Optional[str] = None
    entities: Optional[dict] = None  # hashtags, urls, user_mentions, media
