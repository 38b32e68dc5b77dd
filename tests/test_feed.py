"""
FeedController tests against a real in-memory store (latency disabled).
"""

import asyncio
import base64
from unittest.mock import AsyncMock

import pytest

from pratik_blog.audio import ClockAudioOutput, PlaybackState, encode_pcm16
from pratik_blog.config import settings
from pratik_blog.feed import FeedController, matches_query
from pratik_blog.models import Post, PostDraft
from pratik_blog.store import PostStore


def _make_post(post_id: str, title: str = "Untitled", tags: tuple[str, ...] = ()) -> Post:
    return Post(
        id=post_id,
        title=title,
        excerpt="",
        content="Body",
        author="Tester",
        date="Oct 24, 2023",
        image_url="https://example.com/img.png",
        read_time="1 min read",
        tags=tags,
    )


def _make_store(n: int) -> PostStore:
    return PostStore([_make_post(f"p-{i}", title=f"Post {i}") for i in range(n)])


class _BlockingStore(PostStore):
    """Store whose list_posts waits until released, to hold a fetch in flight."""

    def __init__(self, posts):
        super().__init__(posts)
        self.release = asyncio.Event()
        self.list_calls = 0

    async def list_posts(self, offset=0, limit=6):
        self.list_calls += 1
        await self.release.wait()
        return await super().list_posts(offset, limit)


# --------------------------------------------------------------------------- #
# Pagination
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio
async def test_refresh_loads_featured_and_first_page():
    feed = FeedController(_make_store(20))

    await feed.refresh()

    assert len(feed.posts) == 9
    assert [p.id for p in feed.featured] == ["p-0", "p-1", "p-2", "p-3", "p-4"]
    assert feed.cursor == 9
    assert feed.has_more is True
    assert feed.loading is False


def test_page_size_defaults_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "page_size", 4)

    assert FeedController(_make_store(1)).page_size == 4
    assert FeedController(_make_store(1), page_size=6).page_size == 6
    with pytest.raises(ValueError):
        FeedController(_make_store(1), page_size=0)


@pytest.mark.asyncio
async def test_refresh_resets_previously_loaded_pages():
    feed = FeedController(_make_store(30))
    await feed.refresh()
    await feed.load_more()
    assert len(feed.posts) == 18

    await feed.refresh()

    assert len(feed.posts) == 9
    assert feed.cursor == 9


@pytest.mark.asyncio
async def test_load_more_until_exhausted_collects_everything():
    store = _make_store(23)
    feed = FeedController(store)
    await feed.refresh()

    while await feed.load_more():
        pass

    assert [p.id for p in feed.posts] == [p.id for p in store.snapshot()]
    assert feed.has_more is False
    assert feed.at_end is True
    assert await feed.load_more() is False


@pytest.mark.asyncio
async def test_load_more_is_single_flight():
    """A second trigger while a page fetch is outstanding must not fetch again."""
    store = _BlockingStore([_make_post(f"p-{i}") for i in range(30)])
    feed = FeedController(store)

    first = asyncio.create_task(feed.load_more())
    await asyncio.sleep(0)
    assert feed.loading_more is True

    assert await feed.load_more() is False
    assert await feed.on_sentinel_visible() is False

    store.release.set()
    assert await first is True
    assert store.list_calls == 1
    assert len(feed.posts) == 9
    assert feed.loading_more is False


@pytest.mark.asyncio
async def test_sentinel_suppressed_while_searching():
    feed = FeedController(_make_store(30))
    await feed.refresh()
    feed.search("post 1")

    assert await feed.on_sentinel_visible() is False
    assert len(feed.posts) == 9

    feed.search("")
    assert await feed.on_sentinel_visible() is True
    assert len(feed.posts) == 18


@pytest.mark.asyncio
async def test_sentinel_suppressed_during_initial_load_and_when_exhausted():
    feed = FeedController(_make_store(5))
    feed.loading = True
    assert await feed.on_sentinel_visible() is False
    feed.loading = False

    await feed.refresh()
    assert feed.has_more is False
    assert await feed.on_sentinel_visible() is False


@pytest.mark.asyncio
async def test_pages_are_not_deduplicated():
    """
    An insert between page fetches shifts offsets by one, so the last post of
    the first page comes back again at the head of the second page.
    """
    feed = FeedController(_make_store(20))
    await feed.refresh()

    await feed.store.insert_post(PostDraft(title="New", author="Ada", content="Hi"))
    await feed.load_more()

    ids = [p.id for p in feed.posts]
    assert ids.count("p-8") == 2


@pytest.mark.asyncio
async def test_page_landing_after_close_is_discarded():
    store = _BlockingStore([_make_post(f"p-{i}") for i in range(30)])
    feed = FeedController(store)

    task = asyncio.create_task(feed.load_more())
    await asyncio.sleep(0)
    await feed.close()
    store.release.set()

    assert await task is False
    assert feed.posts == []


# --------------------------------------------------------------------------- #
# Search
# --------------------------------------------------------------------------- #


def test_query_matches_title_or_tag_case_insensitively():
    by_title = _make_post("1", title="The Future of AI in Web Development")
    by_tag = _make_post("2", title="Robots", tags=("AI",))
    neither = _make_post("3", title="Mastering Flexbox", tags=("CSS",))

    assert matches_query(by_title, "ai")
    assert matches_query(by_tag, "ai")
    assert not matches_query(neither, "ai")
    assert matches_query(neither, "")


@pytest.mark.asyncio
async def test_search_only_covers_loaded_pages():
    posts = [_make_post(f"p-{i}", title=f"Post {i}") for i in range(15)]
    posts.append(_make_post("late", title="Deep Space"))
    feed = FeedController(PostStore(posts))
    await feed.refresh()

    assert feed.search("space") == []
    assert feed.at_end is False


# --------------------------------------------------------------------------- #
# Create / delete / navigation
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio
async def test_create_post_prepends_to_feed():
    feed = FeedController(_make_store(3))
    await feed.refresh()

    created = await feed.create_post(PostDraft(title="Fresh", author="Ada", content="Words"))

    assert feed.posts[0] == created
    assert len(feed.posts) == 4


@pytest.mark.asyncio
async def test_delete_removes_from_list_and_featured_and_closes_open_post():
    feed = FeedController(_make_store(12))
    await feed.refresh()
    target = feed.posts[2]
    await feed.open_post(target)

    await feed.delete_post(target.id)

    assert target.id not in {p.id for p in feed.posts}
    assert target.id not in {p.id for p in feed.featured}
    assert len(feed.posts) == 8
    assert len(feed.featured) == 4
    assert feed.selected_post is None


@pytest.mark.asyncio
async def test_delete_other_post_keeps_open_post():
    feed = FeedController(_make_store(12))
    await feed.refresh()
    await feed.open_post(feed.posts[0])

    await feed.delete_post("p-7")

    assert feed.selected_post is not None
    assert feed.selected_post.id == "p-0"


# --------------------------------------------------------------------------- #
# Narration lifecycle
# --------------------------------------------------------------------------- #


def _narrating_feed(store: PostStore) -> tuple[FeedController, list[ClockAudioOutput]]:
    outputs: list[ClockAudioOutput] = []

    def factory():
        outputs.append(ClockAudioOutput(lambda: 0.0))
        return outputs[-1]

    payload = base64.b64encode(encode_pcm16([0] * 24000)).decode("ascii")
    feed = FeedController(store, synthesize=AsyncMock(return_value=payload), output_factory=factory)
    return feed, outputs


@pytest.mark.asyncio
async def test_close_post_releases_narration_output():
    feed, outputs = _narrating_feed(_make_store(3))
    await feed.refresh()

    playback = await feed.open_post(feed.posts[0])
    assert await playback.toggle() is PlaybackState.PLAYING

    await feed.close_post()

    assert feed.playback is None
    assert outputs[0].closed is True
    assert playback.state is PlaybackState.IDLE


@pytest.mark.asyncio
async def test_deleting_open_post_releases_narration_output():
    feed, outputs = _narrating_feed(_make_store(3))
    await feed.refresh()
    target = feed.posts[1]
    await (await feed.open_post(target)).toggle()

    await feed.delete_post(target.id)

    assert feed.selected_post is None
    assert outputs[0].closed is True


@pytest.mark.asyncio
async def test_closing_feed_releases_narration_output():
    feed, outputs = _narrating_feed(_make_store(3))
    await feed.refresh()
    await (await feed.open_post(feed.posts[0])).toggle()

    await feed.close()

    assert outputs[0].closed is True
    assert feed.selected_post is None


@pytest.mark.asyncio
async def test_opening_another_post_replaces_the_player():
    feed, outputs = _narrating_feed(_make_store(3))
    await feed.refresh()
    first = await feed.open_post(feed.posts[0])
    await first.toggle()

    second = await feed.open_post(feed.posts[1])

    assert second is not first
    assert second.text == feed.posts[1].content
    assert outputs[0].closed is True
    assert await feed.open_post(feed.posts[1]) is second


@pytest.mark.asyncio
async def test_carousel_clamps_after_featured_delete():
    feed = FeedController(_make_store(12))
    await feed.refresh()
    feed.carousel.go_to(4)

    await feed.delete_post("p-4")

    assert feed.carousel.index == 3
    assert feed.carousel.current.id == "p-3"
