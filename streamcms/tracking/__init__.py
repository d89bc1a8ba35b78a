"""
View tracking

Client-side view counting for movie pages: a de-duplicating tracker that
calls the increment endpoint once per countable visit, an in-process event
bus, and live counter widgets kept in sync through that bus.

Classes:
    ViewIncrementClient  - decides whether a visit counts and fires the increment
    LiveCounterWidget    - displays the count for one slug
    ViewEventBus         - subscribe / unsubscribe / publish keyed by slug
    MemoryStore          - in-memory key-value store
    ManualVisibilityObserver - visibility watch driven by explicit ratio reports
"""

from streamcms.tracking.bus import ViewEventBus, get_view_event_bus, view_event_bus
from streamcms.tracking.client import ViewIncrementClient
from streamcms.tracking.policy import (
    CooldownPolicy,
    DeduplicationPolicy,
    SessionPolicy,
    TrackingPolicy,
    build_policy,
    cooldown_key,
    count_cache_key,
    session_key,
)
from streamcms.tracking.store import KeyValueStore, MemoryStore
from streamcms.tracking.visibility import ManualVisibilityObserver, VisibilityObserver
from streamcms.tracking.widget import LiveCounterWidget

__all__ = [
    "CooldownPolicy",
    "DeduplicationPolicy",
    "KeyValueStore",
    "LiveCounterWidget",
    "ManualVisibilityObserver",
    "MemoryStore",
    "SessionPolicy",
    "TrackingPolicy",
    "ViewEventBus",
    "ViewIncrementClient",
    "VisibilityObserver",
    "build_policy",
    "cooldown_key",
    "count_cache_key",
    "get_view_event_bus",
    "session_key",
    "view_event_bus",
]
