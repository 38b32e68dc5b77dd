"""
APScheduler wiring for the feed's periodic jobs.

The sentinel watcher is sampled on a short interval job and the featured
carousel advances on a slower one. max_instances=1 keeps a slow callback
from overlapping the next tick; the feed's own single-flight flag guards
the page fetch itself.

CLI usage (page through the whole seeded store once, print totals, exit):
    python -m pratik_blog.scheduler --run-now
"""

import asyncio
import sys

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from pratik_blog.carousel import FeaturedCarousel
from pratik_blog.config import settings
from pratik_blog.feed import FeedController
from pratik_blog.sentinel import SentinelWatcher
from pratik_blog.store import build_store
from pratik_blog.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

SENTINEL_JOB_ID = "sentinel_poll"
CAROUSEL_JOB_ID = "carousel_advance"


def create_scheduler(
    watcher: SentinelWatcher,
    interval_seconds: float | None = None,
    carousel: FeaturedCarousel | None = None,
    carousel_seconds: float | None = None,
) -> AsyncIOScheduler:
    """Create and configure the APScheduler instance (not yet started)."""
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        watcher.poll,
        "interval",
        seconds=interval_seconds or settings.sentinel_poll_seconds,
        id=SENTINEL_JOB_ID,
        max_instances=1,
        coalesce=True,
    )
    if carousel is not None:
        scheduler.add_job(
            carousel.advance,
            "interval",
            seconds=carousel_seconds or settings.carousel_interval_seconds,
            id=CAROUSEL_JOB_ID,
            max_instances=1,
            coalesce=True,
        )
    return scheduler


# --------------------------------------------------------------------------- #
# CLI entry point: python -m pratik_blog.scheduler --run-now
# --------------------------------------------------------------------------- #

async def _run_now() -> None:
    setup_logging()
    feed = FeedController(build_store())
    await feed.refresh()

    # Sentinel is always in view; each successful fetch consumes the edge.
    watcher = SentinelWatcher(lambda: True, feed.on_sentinel_visible)
    while feed.has_more:
        await watcher.poll()
        watcher.reset()

    logger.info("run_now_result", loaded=len(feed.posts), featured=len(feed.featured))
    await feed.close()


if __name__ == "__main__":
    if "--run-now" in sys.argv:
        asyncio.run(_run_now())
    else:
        print("Usage: python -m pratik_blog.scheduler --run-now")
        sys.exit(1)
