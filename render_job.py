#!/usr/bin/env python3
"""Batch job entry point: merge timelines and render linked tweet text."""

import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if it exists
env_path = Path(__file__).parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

from tweetkit.cache.memory import MemoryCache  # noqa: E402
from tweetkit.config import TweetkitConfig  # noqa: E402
from tweetkit.rendering.renderer import render_tweet_batch  # noqa: E402
from tweetkit.sources.archive import ArchiveTweetSource  # noqa: E402
from tweetkit.timelines.merger import TimelineMerger  # noqa: E402


def tweets_to_json(tweets) -> str:
    """Serialize rendered tweets for output."""
    return json.dumps(
        [
            {
                "tweet_id": t.tweet_id,
                "screen_name": t.screen_name,
                "created_at": t.created_at.isoformat(),
                "text": t.text,
            }
            for t in tweets
        ],
        ensure_ascii=False,
        indent=2,
    )


def main() -> int:
    """Run the render job."""
    logger.info("🚀 Starting timeline render job...")

    try:
        try:
            config = TweetkitConfig.from_env()
            config.validate()
        except ValueError as config_error:
            logger.error(f"❌ CRITICAL: Configuration invalid: {config_error}")
            return 1

        if not config.screen_names:
            logger.error(
                "❌ No screen names configured. Set TWEETKIT_SCREEN_NAMES "
                "(comma-separated handles)."
            )
            return 1

        logger.info("✅ Configuration loaded")
        logger.info(f"   - Archive: {config.archive_dir}")
        logger.info(f"   - Screen names: {config.screen_names}")
        logger.info(f"   - Count: {config.count}")

        merger = TimelineMerger(
            source=ArchiveTweetSource(config.archive_dir),
            cache=MemoryCache(),
            cache_ttl=config.cache_ttl_seconds,
            fail_on_source_error=config.fail_on_source_error,
            fetch_timeout=config.fetch_timeout_seconds,
            max_workers=config.max_workers,
        )

        tweets = merger.merge_timelines(config.screen_names, count=config.count)
        rendered = render_tweet_batch(tweets, base_url=config.link_base_url)
        output = tweets_to_json(rendered)

        if config.output_file:
            Path(config.output_file).write_text(output, encoding="utf-8")
            logger.info(f"✅ Wrote {len(rendered)} tweets to {config.output_file}")
        else:
            print(output)
            logger.info(f"✅ Rendered {len(rendered)} tweets")

        return 0

    except Exception as e:
        logger.error(f"❌ Job failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
