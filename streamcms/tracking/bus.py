"""
View Event Bus

Synchronous publish/subscribe registry keyed by movie slug.  The tracker
publishes the new count after a successful increment and every counter
widget subscribed to that slug receives it before ``publish`` returns.

Module-level singleton:
    view_event_bus         - shared instance
    get_view_event_bus()   - getter (dependency-injection friendly)
"""

import logging
from typing import Callable

logger = logging.getLogger(__name__)

ViewCountCallback = Callable[[int], None]


class ViewEventBus:
    """
    Per-slug fan-out of view count updates.

    Callbacks run in registration order.  There is no buffering: a callback
    registered after a publish never sees that publish.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[ViewCountCallback]] = {}

    def subscribe(self, slug: str, callback: ViewCountCallback) -> Callable[[], None]:
        """Register ``callback`` for ``slug`` and return its unsubscribe handle.

        The handle may be called any number of times.
        """
        self._subscribers.setdefault(slug, []).append(callback)
        logger.debug("View subscriber added for %s (total: %d)", slug, self.subscriber_count(slug))

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(slug)
            if not callbacks:
                return
            try:
                callbacks.remove(callback)
            except ValueError:
                return  # Already removed
            if not callbacks:
                del self._subscribers[slug]
            logger.debug("View subscriber removed for %s", slug)

        return unsubscribe

    def publish(self, slug: str, new_count: int) -> int:
        """Deliver ``new_count`` to every subscriber of ``slug``.

        Returns:
            Number of callbacks invoked.
        """
        callbacks = list(self._subscribers.get(slug, ()))
        delivered = 0
        for callback in callbacks:
            try:
                callback(new_count)
                delivered += 1
            except Exception:
                logger.exception("View subscriber for %s failed", slug)
        return delivered

    def subscriber_count(self, slug: str) -> int:
        return len(self._subscribers.get(slug, ()))

    def slugs(self) -> list[str]:
        """Slugs that currently have at least one subscriber."""
        return list(self._subscribers)


# ── Module-level singleton ────────────────────────────────────────────────────

view_event_bus = ViewEventBus()


def get_view_event_bus() -> ViewEventBus:
    """Return the global ViewEventBus singleton."""
    return view_event_bus
