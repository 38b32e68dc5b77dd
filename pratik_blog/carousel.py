"""Featured-post carousel: a wrapping slide index over the featured subset."""

from collections.abc import Callable

from pratik_blog.models import Post
from pratik_blog.utils.logging import get_logger

logger = get_logger(__name__)


class FeaturedCarousel:
    """
    Index into a live list of slides.

    The slide list is read on every access, so a delete that shrinks it is
    picked up immediately; the index is clamped to the last slide.
    """

    def __init__(self, slides: Callable[[], list[Post]]):
        self._slides = slides
        self._index = 0

    @property
    def index(self) -> int:
        count = len(self._slides())
        if count == 0:
            return 0
        if self._index >= count:
            self._index = count - 1
        return self._index

    @property
    def current(self) -> Post | None:
        """The visible slide, or None when there is nothing to show."""
        slides = self._slides()
        if not slides:
            return None
        return slides[self.index]

    def next(self) -> Post | None:
        count = len(self._slides())
        if count:
            self._index = (self.index + 1) % count
        return self.current

    def prev(self) -> Post | None:
        count = len(self._slides())
        if count:
            self._index = count - 1 if self.index == 0 else self.index - 1
        return self.current

    def go_to(self, index: int) -> Post | None:
        count = len(self._slides())
        if not 0 <= index < count:
            raise IndexError(f"slide {index} out of range for {count} slides")
        self._index = index
        return self.current

    async def advance(self) -> None:
        """Interval tick."""
        if self.next() is not None:
            logger.debug("carousel_advanced", index=self._index)
