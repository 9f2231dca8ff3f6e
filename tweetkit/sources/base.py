"""Base classes for tweet sources."""

import logging
from abc import ABC, abstractmethod
from datetime import timezone
from typing import List, Optional

from dateutil import parser

from ..models.tweet import Tweet

logger = logging.getLogger(__name__)


def parse_tweet(tweet_data: dict) -> Optional[Tweet]:
    """Parse an API status object into a Tweet.

    Handles both timestamp formats seen in the wild:
    - "Wed Oct 10 20:19:24 +0000 2018" (REST v1.1)
    - "2018-10-10T20:19:24.000Z" (ISO 8601)

    Timestamps without a UTC offset are taken as UTC.

    Args:
        tweet_data: Raw status dict from the API

    Returns:
        Tweet object or None if parsing fails
    """
    try:
        created_at = tweet_data.get("created_at")
        if not created_at:
            raise ValueError("missing created_at")
        try:
            timestamp = parser.isoparse(created_at)
        except (ValueError, TypeError):
            timestamp = parser.parse(created_at)
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)

        user = tweet_data.get("user") or {}
        screen_name = user.get("screen_name", "")
        tweet_id = tweet_data.get("id_str") or str(tweet_data.get("id", ""))

        return Tweet(
            tweet_id=tweet_id,
            screen_name=screen_name,
            # extended-mode statuses carry the text in full_text
            text=tweet_data.get("full_text") or tweet_data.get("text", ""),
            created_at=timestamp,
            user_id=user.get("id_str") or (str(user["id"]) if "id" in user else None),
            user_name=user.get("name"),
            url=f"https://twitter.com/{screen_name}/status/{tweet_id}" if screen_name else None,
            source=tweet_data.get("source"),
            lang=tweet_data.get("lang"),
            retweet_count=tweet_data.get("retweet_count", 0),
            favorite_count=tweet_data.get("favorite_count", 0),
            in_reply_to_status_id=tweet_data.get("in_reply_to_status_id_str"),
            entities=tweet_data.get("entities"),
        )
    except Exception as e:
        logger.error(f"Error parsing tweet: {e}", exc_info=True)
        return None


class TweetSource(ABC):
    """Base class for tweet sources."""

    @abstractmethod
    def get_user_timeline(self, screen_name: str, count: int = 20) -> List[Tweet]:
        """Get the most recent tweets of a user.

        Args:
            screen_name: Twitter handle (without @)
            count: Maximum number of tweets

        Returns:
            Tweets, newest first

        Raises:
            TweetSourceError: If the timeline cannot be fetched
        """
        pass

    @abstractmethod
    def get_list_timeline(
        self,
        list_id: Optional[str] = None,
        slug: Optional[str] = None,
        owner_screen_name: Optional[str] = None,
        count: int = 20,
    ) -> List[Tweet]:
        """Get the most recent tweets of a list.

        Args:
            list_id: Numeric list id
            slug: List slug (requires owner_screen_name)
            owner_screen_name: Handle of the list owner
            count: Maximum number of tweets

        Returns:
            Tweets, newest first

        Raises:
            TweetSourceError: If the timeline cannot be fetched
        """
        pass
