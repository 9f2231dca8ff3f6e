"""Batch rendering of tweet text with linked entities."""

import logging
from dataclasses import replace
from typing import List

from ..errors import MalformedEntityError
from ..models.tweet import Tweet
from .entities import DEFAULT_LINK_BASE_URL, collect_entities
from .splicer import splice_text

logger = logging.getLogger(__name__)


def render_tweet(tweet: Tweet, base_url: str = DEFAULT_LINK_BASE_URL) -> Tweet:
    """Return a copy of the tweet with entity links spliced into its text.

    Args:
        tweet: Tweet to render
        base_url: Base URL used for hashtag and mention links

    Returns:
        New Tweet whose text carries the HTML anchors

    Raises:
        MalformedEntityError: If one of the tweet's entities is malformed
    """
    if not tweet.entities:
        return tweet

    records = collect_entities(tweet.entities, base_url)
    return replace(tweet, text=splice_text(tweet.text, records, strict=False))


def render_tweet_batch(tweets: List[Tweet], base_url: str = DEFAULT_LINK_BASE_URL) -> List[Tweet]:
    """Render every tweet of a batch.

    A tweet with malformed entities keeps its original text; the rest of the
    batch is still rendered.

    Args:
        tweets: Tweets to render
        base_url: Base URL used for hashtag and mention links

    Returns:
        Rendered tweets, in input order
    """
    rendered = []
    for tweet in tweets:
        try:
            rendered.append(render_tweet(tweet, base_url))
        except MalformedEntityError as e:
            logger.warning(f"Leaving tweet {tweet.tweet_id} unlinked: {e}")
            rendered.append(tweet)
    return rendered
