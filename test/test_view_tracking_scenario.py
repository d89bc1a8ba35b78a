"""
End-to-end view tracking: tracker, endpoint, bus and widgets against the real app.
"""

import asyncio

import httpx
from httpx import ASGITransport

from conftest import get_view_count
from main import app
from streamcms.models import Movie
from streamcms.tracking import (
    LiveCounterWidget,
    ManualVisibilityObserver,
    MemoryStore,
    ViewEventBus,
    ViewIncrementClient,
)


class RecordingTransport(ASGITransport):
    """ASGI transport that remembers every request it forwards."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return await super().handle_async_request(request)


async def test_quantum_paradox_counted_once_per_session(setup_test_database, published_movie: Movie):
    bus = ViewEventBus()
    session_store, local_store = MemoryStore(), MemoryStore()
    transport = RecordingTransport(app=app)

    header = LiveCounterWidget("quantum-paradox", 15420, bus=bus, local_store=local_store)
    sidebar = LiveCounterWidget("quantum-paradox", 15420, bus=bus, local_store=local_store)
    header.mount()
    sidebar.mount()

    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        video = ManualVisibilityObserver("video")
        tracker = ViewIncrementClient(
            "quantum-paradox",
            http,
            policy="session",
            session_store=session_store,
            local_store=local_store,
            bus=bus,
            media_observer=video,
            delay=0.5,
            threshold=0.5,
            initial_count=15420,
        )
        assert tracker.mount() is True

        await asyncio.sleep(0.6)
        video.report(0.6)
        await tracker.wait()

        assert [(r.method, r.url.path) for r in transport.requests] == [("POST", "/content/quantum-paradox/views")]
        assert header.render() == sidebar.render() == "15,421 views"
        assert header.is_incrementing and sidebar.is_incrementing
        assert await get_view_count("quantum-paradox") == 15421

        # Second visit in the same session, with a stale server-rendered count
        tracker.unmount()
        header.unmount()
        sidebar.unmount()

        revisit_widget = LiveCounterWidget("quantum-paradox", 15420, bus=bus, local_store=local_store)
        revisit_widget.mount()
        revisit = ViewIncrementClient(
            "quantum-paradox",
            http,
            session_store=session_store,
            local_store=local_store,
            bus=bus,
            media_observer=ManualVisibilityObserver("video"),
            delay=0.01,
        )
        assert revisit.mount() is False
        await asyncio.sleep(0.05)

    assert len(transport.requests) == 1
    assert revisit_widget.render() == "15,421 views"
    assert await get_view_count("quantum-paradox") == 15421


async def test_ghost_movie_leaves_everything_unchanged(setup_test_database, published_movie: Movie):
    bus = ViewEventBus()
    session_store, local_store = MemoryStore(), MemoryStore()
    widget = LiveCounterWidget("ghost-movie", 0, bus=bus, local_store=local_store)
    widget.mount()

    async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        tracker = ViewIncrementClient(
            "ghost-movie",
            http,
            session_store=session_store,
            local_store=local_store,
            bus=bus,
            delay=0.01,
            fallback_delay=0.02,
        )
        tracker.mount()
        await asyncio.sleep(0.1)
        await tracker.wait()

    assert not tracker.has_tracked
    assert session_store.get("viewed_ghost-movie") is None
    assert len(local_store) == 0
    assert widget.render() == "0 views"
    assert widget.is_incrementing is False


async def test_unpublished_movie_is_treated_like_a_failure(setup_test_database, draft_movie: Movie):
    bus = ViewEventBus()
    published = []
    bus.subscribe("directors-cut", published.append)

    async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        tracker = ViewIncrementClient("directors-cut", http, bus=bus)
        tracker.trigger()
        await tracker.wait()

    assert published == []
    assert await get_view_count("directors-cut") == 7


async def test_cooldown_policy_against_real_endpoint(setup_test_database, published_movie: Movie):
    bus = ViewEventBus()
    local_store = MemoryStore()
    now = [1_700_000_000.0]

    async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:

        async def visit():
            tracker = ViewIncrementClient(
                "quantum-paradox",
                http,
                policy="cooldown",
                session_store=MemoryStore(),
                local_store=local_store,
                bus=bus,
                clock=lambda: now[0],
                delay=0.01,
                fallback_delay=0.01,
            )
            tracker.mount()
            await asyncio.sleep(0.06)
            await tracker.wait()

        await visit()
        now[0] += 5 * 60
        await visit()
        assert await get_view_count("quantum-paradox") == 15421

        now[0] += 30 * 60
        await visit()

    assert await get_view_count("quantum-paradox") == 15422
