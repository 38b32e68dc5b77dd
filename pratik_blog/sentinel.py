"""
Visibility trigger for infinite scroll.

A visibility check reports whether the end-of-list sentinel is within the proximity
margin of the viewport. The watcher fires its callback once on each
not-visible -> visible edge; staying visible does not fire again unless
the callback declined the previous attempt.
"""

from collections.abc import Awaitable, Callable

from pratik_blog.utils.logging import get_logger

logger = get_logger(__name__)

ROOT_MARGIN_PX = 100


def within_margin(sentinel_top: float, viewport_bottom: float, margin: float = ROOT_MARGIN_PX) -> bool:
    """True when the sentinel's top edge is no more than `margin` below the viewport."""
    return sentinel_top <= viewport_bottom + margin


class SentinelWatcher:
    def __init__(
        self,
        is_visible: Callable[[], bool],
        callback: Callable[[], Awaitable[object]],
    ):
        self._is_visible = is_visible
        self._callback = callback
        self._armed = True
        self.enabled = True

    async def poll(self) -> bool:
        """
        Sample visibility; returns True if the visible edge was consumed.

        A callback that returns a falsy value declined the trigger (filter
        active, fetch in flight), so the edge stays armed and the next
        visible poll retries.
        """
        if not self.enabled:
            return False

        if not self._is_visible():
            self._armed = True
            return False
        if not self._armed:
            return False

        try:
            handled = await self._callback()
        except Exception as exc:
            logger.warning("sentinel_callback_failed", error=str(exc))
            handled = True
        if handled:
            self._armed = False
        return bool(handled)

    def reset(self) -> None:
        """Re-arm so the next visible poll fires even without leaving view."""
        self._armed = True

    def disable(self) -> None:
        self.enabled = False
