"""
Feed state: paginated post list, featured carousel, search filter and the
currently open post with its narration player.

Pages are appended in arrival order without de-duplication. Because the
store cursor is a raw offset, a create or delete that races an in-flight
page fetch can surface a post twice or skip one; that is accepted.
"""

from collections.abc import Awaitable, Callable

from pratik_blog.audio import AudioOutput, ClockAudioOutput, PlaybackController
from pratik_blog.carousel import FeaturedCarousel
from pratik_blog.config import settings
from pratik_blog.gemini import GeminiClient
from pratik_blog.models import Post, PostDraft
from pratik_blog.store import PostStore
from pratik_blog.utils.logging import get_logger

logger = get_logger(__name__)


def matches_query(post: Post, query: str) -> bool:
    """Case-insensitive substring match on the title or any tag."""
    needle = query.lower()
    if needle in post.title.lower():
        return True
    return any(needle in tag.lower() for tag in post.tags)


class FeedController:
    """Owns the loaded pages for one view of a PostStore."""

    def __init__(
        self,
        store: PostStore,
        page_size: int | None = None,
        synthesize: Callable[[str], Awaitable[str | None]] | None = None,
        output_factory: Callable[[], AudioOutput] = ClockAudioOutput,
    ):
        page_size = settings.page_size if page_size is None else page_size
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.store = store
        self.page_size = page_size
        self._synthesize = synthesize or GeminiClient().synthesize_speech
        self._output_factory = output_factory

        self.posts: list[Post] = []
        self.featured: list[Post] = []
        self.carousel = FeaturedCarousel(lambda: self.featured)
        self.selected_post: Post | None = None
        self.playback: PlaybackController | None = None
        self.query: str = ""

        self.cursor: int = 0
        self.has_more: bool = True
        self.loading: bool = False
        self.loading_more: bool = False
        self._closed = False

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #

    async def refresh(self) -> None:
        """Full reload: featured subset plus the first page, cursor back to 0."""
        self.loading = True
        self.cursor = 0
        self.posts = []
        try:
            featured = await self.store.list_featured()
            page = await self.store.list_posts(0, self.page_size)
        except Exception as exc:
            logger.error("feed_refresh_failed", error=str(exc))
            return
        finally:
            self.loading = False

        if self._closed:
            return
        self.featured = list(featured)
        self.posts = list(page.data)
        self.cursor = page.next_cursor or 0
        self.has_more = page.has_more
        logger.info("feed_refreshed", loaded=len(self.posts), has_more=self.has_more)

    async def load_more(self) -> bool:
        """
        Fetch and append the next page.

        Returns False without fetching when another page fetch is in flight
        or the collection is exhausted.
        """
        if self.loading_more or not self.has_more:
            return False

        self.loading_more = True
        try:
            page = await self.store.list_posts(self.cursor, self.page_size)
        except Exception as exc:
            logger.error("feed_load_more_failed", cursor=self.cursor, error=str(exc))
            return False
        finally:
            self.loading_more = False

        if self._closed:
            logger.debug("feed_page_discarded", cursor=self.cursor)
            return False

        self.posts.extend(page.data)
        self.cursor = page.next_cursor or 0
        self.has_more = page.has_more
        logger.info("feed_page_loaded", returned=len(page.data), cursor=self.cursor,
                    has_more=self.has_more)
        return True

    async def on_sentinel_visible(self) -> bool:
        """Auto-pagination hook. Suspended while a search filter is active."""
        if self.loading or not self.has_more or self.query:
            return False
        return await self.load_more()

    # ------------------------------------------------------------------ #
    # Search
    # ------------------------------------------------------------------ #

    def search(self, query: str) -> list[Post]:
        self.query = query
        return self.filtered_posts()

    def filtered_posts(self) -> list[Post]:
        """Loaded posts matching the current query; never reaches unloaded pages."""
        if not self.query:
            return list(self.posts)
        return [p for p in self.posts if matches_query(p, self.query)]

    @property
    def at_end(self) -> bool:
        return not self.query and not self.has_more and bool(self.filtered_posts())

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #

    async def create_post(self, draft: PostDraft) -> Post:
        created = await self.store.insert_post(draft)
        if not self._closed:
            self.posts.insert(0, created)
        return created

    async def delete_post(self, post_id: str) -> None:
        await self.store.remove_post(post_id)
        if self._closed:
            return
        self.posts = [p for p in self.posts if p.id != post_id]
        self.featured = [p for p in self.featured if p.id != post_id]
        if self.selected_post is not None and self.selected_post.id == post_id:
            await self.close_post()

    # ------------------------------------------------------------------ #
    # Navigation
    # ------------------------------------------------------------------ #

    async def open_post(self, post: Post) -> PlaybackController:
        """Show a post; its narration player lives until the post is closed."""
        if self.selected_post is not None and self.selected_post.id != post.id:
            await self.close_post()
        self.selected_post = post
        if self.playback is None:
            self.playback = PlaybackController(
                post.content, self._synthesize, output_factory=self._output_factory
            )
        return self.playback

    async def close_post(self) -> None:
        """Back to the list; releases the open post's audio output."""
        self.selected_post = None
        playback, self.playback = self.playback, None
        if playback is not None:
            await playback.aclose()

    async def close(self) -> None:
        """Tear down the view; late completions become no-ops."""
        self._closed = True
        await self.close_post()
