"""
View Increment Client

Counts a view of one movie page at most once per mount:

1. On ``mount()`` the de-duplication policy is checked; an already counted
   slug is a silent no-op.
2. After the attention delay the media element (or, without one, the content
   container) is watched; the increment fires once its visible ratio reaches
   the threshold.  Without any watch the increment fires after a fallback timer.
3. A successful response writes the marker and publishes the new count on
   the event bus.  Failures are logged at debug level and dropped.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

import httpx

from streamcms.tracking.bus import ViewEventBus, get_view_event_bus
from streamcms.tracking.policy import (
    DEFAULT_COOLDOWN_SECONDS,
    DeduplicationPolicy,
    TrackingPolicy,
    build_policy,
    count_cache_key,
)
from streamcms.tracking.store import KeyValueStore, MemoryStore
from streamcms.tracking.visibility import VisibilityObserver

logger = logging.getLogger(__name__)

DEFAULT_ATTENTION_DELAY = 0.5
DEFAULT_VISIBILITY_THRESHOLD = 0.5
FALLBACK_DELAY = 2.0
VIEWS_ENDPOINT = "/content/{slug}/views"


class ViewIncrementClient:
    """
    Tracks a single mount of a movie page.

    Args:
        slug: Movie slug
        http_client: Client pointed at the site serving the increment endpoint
        policy: ``session`` or ``cooldown``
        session_store: Store for session markers
        local_store: Store for cooldown timestamps and the last known count
        bus: Event bus the new count is published on
        media_observer: Visibility watch of the primary media element
        container_observer: Visibility watch of the main content container
        delay: Seconds to wait before watching visibility
        threshold: Visible ratio that counts as attention
        cooldown_seconds: Cooldown window for the cooldown policy
        fallback_delay: Seconds before firing when no watch is available
        initial_count: Server-rendered count, used for the +1 fallback
        clock: Wall clock in seconds, used for cooldown timestamps
    """

    def __init__(
        self,
        slug: str,
        http_client: httpx.AsyncClient,
        *,
        policy: TrackingPolicy | str = TrackingPolicy.SESSION,
        session_store: Optional[KeyValueStore] = None,
        local_store: Optional[KeyValueStore] = None,
        bus: Optional[ViewEventBus] = None,
        media_observer: Optional[VisibilityObserver] = None,
        container_observer: Optional[VisibilityObserver] = None,
        delay: float = DEFAULT_ATTENTION_DELAY,
        threshold: float = DEFAULT_VISIBILITY_THRESHOLD,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        fallback_delay: float = FALLBACK_DELAY,
        initial_count: int = 0,
        clock: Callable[[], float] = time.time,
        endpoint: str = VIEWS_ENDPOINT,
    ) -> None:
        self.slug = slug
        self.http_client = http_client
        self.session_store = session_store if session_store is not None else MemoryStore()
        self.local_store = local_store if local_store is not None else MemoryStore()
        self.bus = bus or get_view_event_bus()
        self.policy: DeduplicationPolicy = build_policy(
            policy,
            self.session_store,
            self.local_store,
            cooldown_seconds=cooldown_seconds,
            clock=clock,
        )
        self.media_observer = media_observer
        self.container_observer = container_observer
        self.delay = delay
        self.threshold = threshold
        self.fallback_delay = fallback_delay
        self.initial_count = initial_count
        self.url = endpoint.format(slug=slug)

        self._has_tracked = False
        self._in_flight = False
        self._delay_handle: Optional[asyncio.TimerHandle] = None
        self._fallback_handle: Optional[asyncio.TimerHandle] = None
        self._observer: Optional[VisibilityObserver] = None
        self._task: Optional[asyncio.Task] = None
        self.request_count = 0

    @property
    def has_tracked(self) -> bool:
        return self._has_tracked

    @property
    def is_tracking(self) -> bool:
        return self._in_flight

    @property
    def is_pending(self) -> bool:
        """True while a timer or visibility watch is armed."""
        return any((self._delay_handle, self._fallback_handle, self._observer))

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def mount(self) -> bool:
        """Arm the attention timer.

        Must be called from a running event loop.  Returns False when the
        view is not countable (already tracked, in flight, or de-duplicated).
        """
        if self._has_tracked or self._in_flight or self.is_pending:
            return False

        if self.policy.is_counted(self.slug):
            logger.debug("View for %s already counted under %s policy", self.slug, self.policy.name.value)
            return False

        loop = asyncio.get_running_loop()
        self._delay_handle = loop.call_later(self.delay, self._start_watching)
        return True

    def unmount(self) -> None:
        """Cancel pending timers and detach the visibility watch.

        A request already sent is left to finish.
        """
        if self._delay_handle is not None:
            self._delay_handle.cancel()
            self._delay_handle = None
        if self._fallback_handle is not None:
            self._fallback_handle.cancel()
            self._fallback_handle = None
        self._disconnect()

    async def wait(self) -> None:
        """Wait for the dispatched request, if any, to complete."""
        if self._task is not None:
            await asyncio.shield(self._task)

    # ── Attention detection ───────────────────────────────────────────────────

    def _start_watching(self) -> None:
        self._delay_handle = None
        observer = self.media_observer or self.container_observer

        if observer is None:
            loop = asyncio.get_running_loop()
            self._fallback_handle = loop.call_later(self.fallback_delay, self._on_fallback)
            return

        self._observer = observer
        observer.observe(self._on_visibility)

    def _on_fallback(self) -> None:
        self._fallback_handle = None
        self.trigger()

    def _on_visibility(self, ratio: float) -> None:
        if ratio < self.threshold:
            return
        self._disconnect()
        self.trigger()

    def _disconnect(self) -> None:
        if self._observer is not None:
            self._observer.disconnect()
            self._observer = None

    # ── Increment ─────────────────────────────────────────────────────────────

    def trigger(self) -> bool:
        """Send the increment now.

        Dropped (returns False) while a request is in flight or once this
        mount has tracked.
        """
        if self._in_flight or self._has_tracked:
            logger.debug("Dropping duplicate view attempt for %s", self.slug)
            return False

        self._in_flight = True
        self._task = asyncio.get_running_loop().create_task(self._track())
        return True

    async def _track(self) -> None:
        try:
            self.request_count += 1
            try:
                response = await self.http_client.post(self.url, headers={"Content-Type": "application/json"})
            except httpx.HTTPError as e:
                logger.debug("Failed to track view for %s: %s", self.slug, e)
                return

            if not response.is_success:
                logger.debug("View increment for %s returned %d", self.slug, response.status_code)
                return

            new_count = self._read_count(response)
            self.policy.mark_counted(self.slug)
            self._has_tracked = True
            delivered = self.bus.publish(self.slug, new_count)
            logger.debug("View counted for %s: %d (%d subscribers)", self.slug, new_count, delivered)
        finally:
            self._in_flight = False

    def _read_count(self, response: httpx.Response) -> int:
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict):
            count = payload.get("viewCount")
            if isinstance(count, int) and not isinstance(count, bool):
                return count

        return self.last_known_count() + 1

    def last_known_count(self) -> int:
        """The higher of the server-rendered count and the cached count."""
        cached = self.local_store.get(count_cache_key(self.slug))
        try:
            cached_count = int(cached) if cached is not None else 0
        except ValueError:
            cached_count = 0
        return max(self.initial_count, cached_count)
