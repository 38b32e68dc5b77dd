"""
In-memory post store.

The store owns its post list exclusively; callers hold a reference to the
store instance, never to the list. Offsets are raw positions with no
snapshot isolation: an insert or delete between two list_posts() calls
shifts later pages, so a reader can see a post twice or skip one.
"""

import asyncio
import math
import random
import string
from datetime import date

from pratik_blog.config import settings
from pratik_blog.models import Page, Post, PostDraft
from pratik_blog.seed import format_display_date, seed_posts
from pratik_blog.utils.logging import get_logger

logger = get_logger(__name__)

CHARS_PER_MINUTE = 500

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_LENGTH = 9

# Simulated round-trip per operation (seconds), used when latency is enabled.
_LATENCY = {"list": 0.8, "insert": 1.0, "remove": 0.6}


def compute_read_time(content: str) -> str:
    """ceil(len / 500) minutes, e.g. "3 min read"."""
    return f"{math.ceil(len(content) / CHARS_PER_MINUTE)} min read"


class PostStore:
    """Ordered in-memory collection of posts, newest first."""

    def __init__(
        self,
        posts: list[Post] | None = None,
        simulate_latency: bool = False,
        featured_count: int | None = None,
        rng: random.Random | None = None,
    ):
        self._posts: list[Post] = list(posts or [])
        self._simulate_latency = simulate_latency
        self._featured_count = settings.featured_count if featured_count is None else featured_count
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self._posts)

    def snapshot(self) -> list[Post]:
        return list(self._posts)

    async def _delay(self, op: str) -> None:
        if self._simulate_latency:
            await asyncio.sleep(_LATENCY[op])

    async def list_posts(self, offset: int = 0, limit: int = 6) -> Page:
        if offset < 0:
            raise ValueError(f"offset must be non-negative, got {offset}")
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")

        await self._delay("list")

        end = offset + limit
        has_more = end < len(self._posts)
        page = Page(
            data=self._posts[offset:end],
            has_more=has_more,
            next_cursor=end if has_more else None,
        )
        logger.debug("store_list_posts", offset=offset, limit=limit,
                     returned=len(page.data), has_more=has_more)
        return page

    async def list_featured(self) -> list[Post]:
        return self._posts[: self._featured_count]

    def _new_id(self) -> str:
        taken = {p.id for p in self._posts}
        while True:
            candidate = "".join(self._rng.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))
            if candidate not in taken:
                return candidate

    async def insert_post(self, draft: PostDraft, today: date | None = None) -> Post:
        """Validate the draft, assign id/date/read time, and prepend it."""
        draft.validate()
        await self._delay("insert")

        post = Post(
            id=self._new_id(),
            title=draft.title.strip(),
            excerpt=draft.excerpt,
            content=draft.content,
            author=draft.author.strip(),
            date=format_display_date(today or date.today()),
            image_url=draft.image_url,
            read_time=compute_read_time(draft.content),
            tags=tuple(draft.tags),
        )
        self._posts.insert(0, post)
        logger.info("store_post_inserted", post_id=post.id, total=len(self._posts))
        return post

    async def remove_post(self, post_id: str) -> None:
        await self._delay("remove")
        before = len(self._posts)
        self._posts = [p for p in self._posts if p.id != post_id]
        removed = before - len(self._posts)
        if removed:
            logger.info("store_post_removed", post_id=post_id, total=len(self._posts))
        else:
            logger.debug("store_remove_missing", post_id=post_id)


def build_store(rng: random.Random | None = None) -> PostStore:
    """Seeded store configured from settings."""
    return PostStore(
        seed_posts(rng=rng),
        simulate_latency=settings.store_latency_enabled,
    )
