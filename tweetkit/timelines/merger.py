"""Merged, cached timelines across several users."""

import hashlib
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, List, Optional, Tuple

from ..cache.base import CacheStore
from ..errors import TimelineMergeError
from ..models.tweet import Tweet
from ..sources.base import TweetSource

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 10 * 60
DEFAULT_KEY_PREFIX = "tweetkit_"


def build_cache_key(screen_names: List[str], count: int, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """Build the cache key for a merged timeline.

    Args:
        screen_names: Handles, in the order given by the caller
        count: Number of tweets requested
        prefix: Key prefix

    Returns:
        Prefix followed by the md5 hex digest of "<count>,<name>,<name>..."
    """
    raw = f"{count},{','.join(screen_names)}"
    return prefix + hashlib.md5(raw.encode("utf-8")).hexdigest()


class TimelineMerger:
    """Merges user timelines newest first and caches the result."""

    def __init__(
        self,
        source: TweetSource,
        cache: CacheStore,
        cache_ttl: int = DEFAULT_CACHE_TTL,
        fail_on_source_error: bool = False,
        fetch_timeout: Optional[float] = None,
        max_workers: int = 1,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ):
        """Initialize timeline merger.

        Args:
            source: Tweet source used on a cache miss
            cache: Cache store for merged timelines
            cache_ttl: Default lifetime of a merged timeline in seconds
            fail_on_source_error: Raise instead of skipping a failed source
            fetch_timeout: Seconds allowed per fetch (None waits forever)
            max_workers: Number of timelines fetched in parallel
            key_prefix: Prefix of the cache keys
        """
        self.source = source
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.fail_on_source_error = fail_on_source_error
        self.fetch_timeout = fetch_timeout
        self.max_workers = max_workers
        self.key_prefix = key_prefix

    def _cache_get(self, key: str) -> Optional[Any]:
        try:
            return self.cache.get(key)
        except Exception as e:
            logger.warning(f"Cache read failed for {key}, treating as miss: {e}")
            return None

    def _cache_set(self, key: str, tweets: List[Tweet], ttl: int) -> None:
        try:
            self.cache.set(key, tweets, ttl)
        except Exception as e:
            logger.warning(f"Cache write failed for {key}: {e}")

    def _handle_failure(self, screen_name: str, error: Exception) -> None:
        if self.fail_on_source_error:
            raise TimelineMergeError(f"Failed to fetch timeline for @{screen_name}: {error}") from error
        logger.warning(f"Skipping @{screen_name}, timeline fetch failed: {error}")

    def _fetch_sequential(self, screen_names: List[str], count: int) -> Tuple[List[Tweet], List[str]]:
        tweets: List[Tweet] = []
        failed: List[str] = []
        for screen_name in screen_names:
            try:
                tweets.extend(self.source.get_user_timeline(screen_name, count=count))
            except Exception as e:
                self._handle_failure(screen_name, e)
                failed.append(screen_name)
        return tweets, failed

    def _fetch_parallel(self, screen_names: List[str], count: int) -> Tuple[List[Tweet], List[str]]:
        tweets: List[Tweet] = []
        failed: List[str] = []
        workers = max(1, self.max_workers)
        if self.fetch_timeout is not None:
            # every fetch must start right away for its deadline to hold
            workers = max(workers, len(screen_names))
        executor = ThreadPoolExecutor(max_workers=workers)
        try:
            futures = [
                (name, executor.submit(self.source.get_user_timeline, name, count=count))
                for name in screen_names
            ]
            deadline = None
            if self.fetch_timeout is not None:
                deadline = time.monotonic() + self.fetch_timeout

            # Collected in request order so the merge never depends on completion order
            for screen_name, future in futures:
                remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
                try:
                    tweets.extend(future.result(timeout=remaining))
                except FutureTimeoutError:
                    future.cancel()
                    self._handle_failure(
                        screen_name, TimeoutError(f"no response after {self.fetch_timeout}s")
                    )
                    failed.append(screen_name)
                except Exception as e:
                    self._handle_failure(screen_name, e)
                    failed.append(screen_name)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
        return tweets, failed

    def merge_timelines(
        self, screen_names: List[str], count: int = 20, cache_ttl: Optional[int] = None
    ) -> List[Tweet]:
        """Return the latest tweets from any number of users, newest first.

        Args:
            screen_names: Twitter handles
            count: Number of tweets to return (also fetched per user)
            cache_ttl: Lifetime of the merged result; None or negative uses the default

        Returns:
            Up to count tweets sorted by created_at descending

        Raises:
            TimelineMergeError: If a source fails and fail_on_source_error is set
        """
        if cache_ttl is None or cache_ttl < 0:
            cache_ttl = self.cache_ttl

        key = build_cache_key(screen_names, count, self.key_prefix)
        cached = self._cache_get(key)
        if cached is not None:
            logger.debug(f"Cache hit for merged timeline {key}")
            return cached

        logger.debug(f"Cache miss for merged timeline {key}")
        if self.max_workers > 1 or self.fetch_timeout is not None:
            tweets, failed = self._fetch_parallel(screen_names, count)
        else:
            tweets, failed = self._fetch_sequential(screen_names, count)

        # sort is stable, so tweets with equal timestamps keep their fetch order
        tweets.sort(key=lambda t: t.created_at, reverse=True)
        tweets = tweets[:count]

        if failed:
            logger.info(
                f"Merged {len(tweets)} tweets from {len(screen_names) - len(failed)} of "
                f"{len(screen_names)} users; not caching partial result"
            )
        else:
            self._cache_set(key, tweets, cache_ttl)
            logger.info(f"Merged {len(tweets)} tweets from {len(screen_names)} users")

        return tweets
