"""
De-duplication policies for view tracking.

Session policy: at most one counted view per slug while the session store lives.
Cooldown policy: a slug is countable again once the cooldown window has passed
since the last counted view, stored as epoch milliseconds.
"""

import enum
import logging
import math
import time
from typing import Callable, Optional

from streamcms.tracking.store import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS = 30 * 60


class TrackingPolicy(str, enum.Enum):
    SESSION = "session"
    COOLDOWN = "cooldown"


def session_key(slug: str) -> str:
    return f"viewed_{slug}"


def cooldown_key(slug: str) -> str:
    return f"lastView_{slug}"


def count_cache_key(slug: str) -> str:
    return f"viewCount_{slug}"


class DeduplicationPolicy:
    """Base class: decides whether a slug was already counted and records new counts."""

    name: TrackingPolicy

    def is_counted(self, slug: str) -> bool:
        raise NotImplementedError

    def mark_counted(self, slug: str) -> None:
        raise NotImplementedError


class SessionPolicy(DeduplicationPolicy):
    name = TrackingPolicy.SESSION

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def is_counted(self, slug: str) -> bool:
        return self.store.get(session_key(slug)) is not None

    def mark_counted(self, slug: str) -> None:
        self.store.set(session_key(slug), "true")


class CooldownPolicy(DeduplicationPolicy):
    name = TrackingPolicy.COOLDOWN

    def __init__(
        self,
        store: KeyValueStore,
        window_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.window_ms = int(window_seconds * 1000)
        self.clock = clock

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def last_view_ms(self, slug: str) -> Optional[int]:
        raw = self.store.get(cooldown_key(slug))
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            logger.debug("Ignoring unreadable cooldown marker for %s: %r", slug, raw)
            return None

    def remaining_seconds(self, slug: str) -> float:
        last_view = self.last_view_ms(slug)
        if last_view is None:
            return 0.0
        return max(0.0, (self.window_ms - (self._now_ms() - last_view)) / 1000)

    def is_counted(self, slug: str) -> bool:
        last_view = self.last_view_ms(slug)
        if last_view is None:
            return False
        if self._now_ms() - last_view < self.window_ms:
            logger.debug(
                "View tracking on cooldown for %s. %d minutes remaining.",
                slug,
                math.ceil(self.remaining_seconds(slug) / 60),
            )
            return True
        return False

    def mark_counted(self, slug: str) -> None:
        self.store.set(cooldown_key(slug), str(self._now_ms()))


def build_policy(
    policy: TrackingPolicy | str,
    session_store: KeyValueStore,
    local_store: KeyValueStore,
    cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
    clock: Callable[[], float] = time.time,
) -> DeduplicationPolicy:
    """Build the policy named by ``policy``.

    Session markers go to ``session_store``; cooldown timestamps go to ``local_store``.
    """
    policy = TrackingPolicy(policy)
    if policy is TrackingPolicy.SESSION:
        return SessionPolicy(session_store)
    return CooldownPolicy(local_store, window_seconds=cooldown_seconds, clock=clock)
