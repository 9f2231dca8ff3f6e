"""Tests for merged, cached timelines."""

import hashlib
import time
from unittest.mock import MagicMock

import pytest

from tests.conftest import create_status, create_tweet
from tweetkit.cache.memory import MemoryCache
from tweetkit.errors import TimelineMergeError, TweetSourceError
from tweetkit.sources.base import parse_tweet
from tweetkit.timelines.merger import TimelineMerger, build_cache_key


def timelines(mapping):
    """Build a get_user_timeline side effect from a screen_name -> tweets mapping."""

    def get_user_timeline(screen_name, count=20):
        result = mapping[screen_name]
        if isinstance(result, Exception):
            raise result
        return list(result[:count])

    return get_user_timeline


class TestBuildCacheKey:
    """Tests for cache key derivation."""

    def test_key_is_deterministic(self):
        """Test that the same query yields the same key."""
        assert build_cache_key(["a", "b"], 3) == build_cache_key(["a", "b"], 3)

    def test_key_depends_on_count_and_order(self):
        """Test that count and name order both change the key."""
        assert build_cache_key(["a", "b"], 3) != build_cache_key(["a", "b"], 4)
        assert build_cache_key(["a", "b"], 3) != build_cache_key(["b", "a"], 3)

    def test_key_format(self):
        """Test prefix plus md5 hex digest."""
        key = build_cache_key(["a", "b"], 3)

        assert key == "tweetkit_" + hashlib.md5(b"3,a,b").hexdigest()
        assert build_cache_key(["a"], 3, prefix="tl_").startswith("tl_")


class TestTimelineMerger:
    """Tests for TimelineMerger.merge_timelines."""

    def test_merge_two_users_sorted_and_truncated(self, mock_source):
        """Test that the newest tweets of both users are merged newest first."""
        mock_source.get_user_timeline.side_effect = timelines(
            {
                "alice": [create_tweet("a2", "alice", 30), create_tweet("a1", "alice", 10)],
                "bob": [create_tweet("b2", "bob", 20), create_tweet("b1", "bob", 5)],
            }
        )
        merger = TimelineMerger(mock_source, MemoryCache())

        result = merger.merge_timelines(["alice", "bob"], count=3)

        assert [t.tweet_id for t in result] == ["a2", "b2", "a1"]
        timestamps = [t.created_at for t in result]
        assert timestamps == sorted(timestamps, reverse=True)
        mock_source.get_user_timeline.assert_any_call("alice", count=3)
        mock_source.get_user_timeline.assert_any_call("bob", count=3)

    def test_equal_timestamps_keep_fetch_order(self, mock_source):
        """Test that ties keep the order the timelines were requested in."""
        mock_source.get_user_timeline.side_effect = timelines(
            {
                "alice": [create_tweet("a", "alice", 10)],
                "bob": [create_tweet("b", "bob", 10)],
            }
        )
        merger = TimelineMerger(mock_source, MemoryCache())

        result = merger.merge_timelines(["alice", "bob"], count=5)

        assert [t.tweet_id for t in result] == ["a", "b"]

    def test_result_is_written_to_cache(self, mock_source, mock_cache):
        """Test that a miss stores the merged result with the TTL."""
        mock_source.get_user_timeline.side_effect = timelines(
            {"alice": [create_tweet("a1", "alice", 1)]}
        )
        merger = TimelineMerger(mock_source, mock_cache, cache_ttl=120)

        result = merger.merge_timelines(["alice"], count=5)

        key = build_cache_key(["alice"], 5)
        mock_cache.get.assert_called_once_with(key)
        mock_cache.set.assert_called_once_with(key, result, 120)

    def test_cache_hit_skips_fetch(self, mock_source):
        """Test that a cache hit returns the stored list without fetching."""
        cache = MemoryCache()
        stored = [create_tweet("x", "alice", 1)]
        cache.set(build_cache_key(["alice"], 5), stored, 600)
        merger = TimelineMerger(mock_source, cache)

        result = merger.merge_timelines(["alice"], count=5)

        assert result is stored
        mock_source.get_user_timeline.assert_not_called()

    def test_second_call_served_from_cache(self, mock_source):
        """Test that the cache actually fills on a miss."""
        mock_source.get_user_timeline.side_effect = timelines(
            {"alice": [create_tweet("a1", "alice", 1)]}
        )
        merger = TimelineMerger(mock_source, MemoryCache())

        first = merger.merge_timelines(["alice"], count=5)
        second = merger.merge_timelines(["alice"], count=5)

        assert second is first
        assert mock_source.get_user_timeline.call_count == 1

    def test_negative_ttl_uses_default(self, mock_source, mock_cache):
        """Test that a negative per-call TTL falls back to the default."""
        mock_source.get_user_timeline.side_effect = timelines({"alice": []})
        merger = TimelineMerger(mock_source, mock_cache)

        merger.merge_timelines(["alice"], count=5, cache_ttl=-1)

        assert mock_cache.set.call_args[0][2] == 600

    def test_failed_source_is_skipped(self, mock_source, mock_cache):
        """Test skip-and-continue when one user's fetch fails."""
        mock_source.get_user_timeline.side_effect = timelines(
            {
                "alice": [create_tweet("a1", "alice", 1)],
                "bob": TweetSourceError("429 Too Many Requests"),
            }
        )
        merger = TimelineMerger(mock_source, mock_cache)

        result = merger.merge_timelines(["alice", "bob"], count=5)

        assert [t.tweet_id for t in result] == ["a1"]
        assert mock_source.get_user_timeline.call_count == 2
        # partial results are not cached
        mock_cache.set.assert_not_called()

    def test_failed_source_raises_when_configured(self, mock_source):
        """Test whole-merge failure when fail_on_source_error is set."""
        mock_source.get_user_timeline.side_effect = timelines(
            {"alice": [], "bob": TweetSourceError("boom")}
        )
        merger = TimelineMerger(mock_source, MemoryCache(), fail_on_source_error=True)

        with pytest.raises(TimelineMergeError):
            merger.merge_timelines(["alice", "bob"], count=5)

    def test_cache_errors_are_treated_as_miss(self, mock_source):
        """Test that an unavailable cache never fails the request."""
        cache = MagicMock()
        cache.get.side_effect = ConnectionError("cache down")
        cache.set.side_effect = ConnectionError("cache down")
        mock_source.get_user_timeline.side_effect = timelines(
            {"alice": [create_tweet("a1", "alice", 1)]}
        )
        merger = TimelineMerger(mock_source, cache)

        result = merger.merge_timelines(["alice"], count=5)

        assert [t.tweet_id for t in result] == ["a1"]
        cache.set.assert_called_once()

    def test_parallel_fetch_is_deterministic(self, mock_source):
        """Test that parallel fetches merge the same way as sequential ones."""
        data = {
            "alice": [create_tweet("a2", "alice", 30), create_tweet("a1", "alice", 10)],
            "bob": [create_tweet("b2", "bob", 20), create_tweet("b1", "bob", 10)],
            "carol": [create_tweet("c1", "carol", 25)],
        }
        mock_source.get_user_timeline.side_effect = timelines(data)
        merger = TimelineMerger(mock_source, MemoryCache(), max_workers=3)

        result = merger.merge_timelines(["alice", "bob", "carol"], count=4)

        assert [t.tweet_id for t in result] == ["a2", "c1", "b2", "a1"]

    def test_fetch_timeout_counts_as_failure(self, mock_source):
        """Test that a fetch exceeding the timeout is skipped."""

        def get_user_timeline(screen_name, count=20):
            if screen_name == "slow":
                time.sleep(1.0)
            return [create_tweet(f"{screen_name}-1", screen_name, 1)]

        mock_source.get_user_timeline.side_effect = get_user_timeline
        merger = TimelineMerger(mock_source, MemoryCache(), fetch_timeout=0.3, max_workers=2)

        result = merger.merge_timelines(["fast", "slow"], count=5)

        assert [t.tweet_id for t in result] == ["fast-1"]

    def test_slow_first_source_does_not_time_out_healthy_one(self, mock_source):
        """Test that a hung fetch with default workers does not drop the next source."""

        def get_user_timeline(screen_name, count=20):
            if screen_name == "slow":
                time.sleep(1.0)
            return [create_tweet(f"{screen_name}-1", screen_name, 1)]

        mock_source.get_user_timeline.side_effect = get_user_timeline
        merger = TimelineMerger(mock_source, MemoryCache(), fetch_timeout=0.3)

        result = merger.merge_timelines(["slow", "fast"], count=5)

        assert [t.tweet_id for t in result] == ["fast-1"]
        assert mock_source.get_user_timeline.call_count == 2

    def test_merge_mixes_offset_and_offsetless_timestamps(self, mock_source):
        """Test that REST and offset-less ISO statuses sort together."""
        rest = parse_tweet(create_status(1, "alice", "Wed Oct 10 20:00:00 +0000 2018"))
        iso = parse_tweet(create_status(2, "bob", "2018-10-10T21:00:00"))
        mock_source.get_user_timeline.side_effect = timelines({"alice": [rest], "bob": [iso]})
        merger = TimelineMerger(mock_source, MemoryCache())

        result = merger.merge_timelines(["alice", "bob"], count=5)

        assert [t.tweet_id for t in result] == ["2", "1"]
