"""Live view counter bound to the view event bus."""

import logging
import time
from typing import Callable, Optional

from streamcms.tracking.bus import ViewEventBus, get_view_event_bus
from streamcms.tracking.policy import count_cache_key
from streamcms.tracking.store import KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)

INCREMENT_FLASH_SECONDS = 0.5


class LiveCounterWidget:
    """
    Displays the view count of one movie.

    The initial value is the higher of the server-rendered count and the last
    count cached in the local store, so navigating back to a stale page never
    shows a lower number.  Every bus update replaces the value, refreshes the
    cache and flags the widget as incrementing for a short moment.
    """

    def __init__(
        self,
        slug: str,
        initial_count: int,
        *,
        bus: Optional[ViewEventBus] = None,
        local_store: Optional[KeyValueStore] = None,
        clock: Callable[[], float] = time.monotonic,
        flash_seconds: float = INCREMENT_FLASH_SECONDS,
    ) -> None:
        self.slug = slug
        self.initial_count = initial_count
        self.bus = bus or get_view_event_bus()
        self.local_store = local_store if local_store is not None else MemoryStore()
        self.clock = clock
        self.flash_seconds = flash_seconds

        self.view_count = initial_count
        self._changed_at: Optional[float] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    @property
    def is_incrementing(self) -> bool:
        if self._changed_at is None:
            return False
        return self.clock() - self._changed_at < self.flash_seconds

    def _cached_count(self) -> Optional[int]:
        raw = self.local_store.get(count_cache_key(self.slug))
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            return None

    def mount(self) -> None:
        if self.mounted:
            return
        cached = self._cached_count()
        if cached is not None and cached > self.initial_count:
            self.view_count = cached
        self._unsubscribe = self.bus.subscribe(self.slug, self.update)

    def unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def update(self, new_count: int) -> None:
        self.view_count = new_count
        self._changed_at = self.clock()
        self.local_store.set(count_cache_key(self.slug), str(new_count))

    def render(self) -> str:
        return f"{self.view_count:,} views"
