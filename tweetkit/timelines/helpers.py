"""Shortcuts for fetching single timelines."""

from typing import List, Optional, Union

from ..models.tweet import Tweet
from ..sources.base import TweetSource


def get_user_timeline(source: TweetSource, screen_name: str, count: int = 20) -> List[Tweet]:
    """Return the latest tweets from a user's timeline."""
    return source.get_user_timeline(screen_name, count=count)


def get_list_timeline(
    source: TweetSource,
    list_ref: Union[int, str],
    owner: Optional[str] = None,
    count: int = 20,
) -> List[Tweet]:
    """Return the latest tweets from a list.

    Args:
        source: Tweet source to query
        list_ref: Either the numeric list id or the list slug
        owner: Handle of the list owner; passed through with a slug, the
            source decides whether it can resolve the list without it
        count: Number of tweets to retrieve

    Returns:
        Tweets, newest first
    """
    if isinstance(list_ref, int) or str(list_ref).isdigit():
        return source.get_list_timeline(list_id=str(list_ref), count=count)

    return source.get_list_timeline(slug=list_ref, owner_screen_name=owner, count=count)
