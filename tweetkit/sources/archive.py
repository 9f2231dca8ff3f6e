"""Tweet source backed by exported API responses on disk."""

import json
import logging
from pathlib import Path
from typing import List, Optional

from ..errors import TweetSourceError
from ..models.tweet import Tweet
from .base import TweetSource, parse_tweet

logger = logging.getLogger(__name__)


class ArchiveTweetSource(TweetSource):
    """Reads timelines from JSON files holding arrays of status objects.

    File layout:
    - <screen_name>.json (lowercased) for user timelines
    - list-<id>.json for lists by id
    - list-<owner>-<slug>.json for lists by slug (lowercased)
    """

    def __init__(self, directory: str | Path):
        """Initialize archive source.

        Args:
            directory: Directory holding the exported JSON files
        """
        self.directory = Path(directory)

    def _load(self, filename: str, count: int) -> List[Tweet]:
        path = self.directory / filename
        if not path.exists():
            raise TweetSourceError(f"No archive file for timeline: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                statuses = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise TweetSourceError(f"Failed to read archive file {path}: {e}") from e

        if not isinstance(statuses, list):
            raise TweetSourceError(f"Archive file {path} must contain a JSON array")

        tweets = [t for t in (parse_tweet(s) for s in statuses) if t is not None]
        tweets.sort(key=lambda t: t.created_at, reverse=True)
        logger.debug(f"Loaded {len(tweets)} tweets from {path}")
        return tweets[:count]

    def get_user_timeline(self, screen_name: str, count: int = 20) -> List[Tweet]:
        return self._load(f"{screen_name.lstrip('@').lower()}.json", count)

    def get_list_timeline(
        self,
        list_id: Optional[str] = None,
        slug: Optional[str] = None,
        owner_screen_name: Optional[str] = None,
        count: int = 20,
    ) -> List[Tweet]:
        if list_id:
            return self._load(f"list-{list_id}.json", count)
        if not slug or not owner_screen_name:
            raise TweetSourceError(
                "A list needs either list_id or both slug and owner_screen_name"
            )
        return self._load(f"list-{owner_screen_name.lower()}-{slug.lower()}.json", count)
