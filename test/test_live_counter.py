"""
Tests for LiveCounterWidget.
"""

from streamcms.tracking import LiveCounterWidget, MemoryStore, ViewEventBus


class ManualClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class TestInitialValue:
    def test_uses_server_count_without_cache(self):
        widget = LiveCounterWidget("quantum-paradox", 15420, bus=ViewEventBus(), local_store=MemoryStore())
        widget.mount()
        assert widget.view_count == 15420
        assert widget.render() == "15,420 views"

    def test_prefers_higher_cached_count(self):
        store = MemoryStore({"viewCount_quantum-paradox": "15421"})
        widget = LiveCounterWidget("quantum-paradox", 15420, bus=ViewEventBus(), local_store=store)
        widget.mount()
        assert widget.view_count == 15421

    def test_ignores_lower_or_unreadable_cache(self):
        for cached in ("15000", "lots"):
            store = MemoryStore({"viewCount_quantum-paradox": cached})
            widget = LiveCounterWidget("quantum-paradox", 15420, bus=ViewEventBus(), local_store=store)
            widget.mount()
            assert widget.view_count == 15420


class TestUpdates:
    def test_update_replaces_value_and_writes_cache(self):
        bus, store = ViewEventBus(), MemoryStore()
        widget = LiveCounterWidget("quantum-paradox", 15420, bus=bus, local_store=store)
        widget.mount()

        bus.publish("quantum-paradox", 15421)

        assert widget.view_count == 15421
        assert widget.render() == "15,421 views"
        assert store.get("viewCount_quantum-paradox") == "15421"

    def test_incrementing_flag_lasts_half_a_second(self):
        bus, clock = ViewEventBus(), ManualClock()
        widget = LiveCounterWidget("quantum-paradox", 1, bus=bus, clock=clock)
        widget.mount()
        assert widget.is_incrementing is False

        bus.publish("quantum-paradox", 2)
        assert widget.is_incrementing is True

        clock.now += 0.49
        assert widget.is_incrementing is True

        clock.now += 0.01
        assert widget.is_incrementing is False

    def test_new_update_restarts_flash(self):
        bus, clock = ViewEventBus(), ManualClock()
        widget = LiveCounterWidget("quantum-paradox", 1, bus=bus, clock=clock)
        widget.mount()

        bus.publish("quantum-paradox", 2)
        clock.now += 0.4
        bus.publish("quantum-paradox", 3)
        clock.now += 0.4

        assert widget.is_incrementing is True
        assert widget.view_count == 3

    def test_other_slugs_ignored(self):
        bus = ViewEventBus()
        widget = LiveCounterWidget("quantum-paradox", 5, bus=bus)
        widget.mount()

        bus.publish("other-movie", 99)

        assert widget.view_count == 5
        assert widget.is_incrementing is False


class TestLifecycle:
    def test_unmount_unsubscribes(self):
        bus = ViewEventBus()
        widget = LiveCounterWidget("quantum-paradox", 5, bus=bus)
        widget.mount()
        assert bus.subscriber_count("quantum-paradox") == 1

        widget.unmount()
        widget.unmount()
        bus.publish("quantum-paradox", 6)

        assert widget.view_count == 5
        assert bus.subscriber_count("quantum-paradox") == 0

    def test_mount_twice_subscribes_once(self):
        bus = ViewEventBus()
        widget = LiveCounterWidget("quantum-paradox", 5, bus=bus)
        widget.mount()
        widget.mount()
        assert bus.subscriber_count("quantum-paradox") == 1

    def test_late_widget_keeps_its_own_initial_value(self):
        bus = ViewEventBus()
        early = LiveCounterWidget("quantum-paradox", 10, bus=bus)
        early.mount()
        bus.publish("quantum-paradox", 11)

        late = LiveCounterWidget("quantum-paradox", 10, bus=bus)
        late.mount()

        assert early.view_count == 11
        assert late.view_count == 10

    def test_cache_shared_across_page_navigation(self):
        bus, store = ViewEventBus(), MemoryStore()
        first_page = LiveCounterWidget("quantum-paradox", 15420, bus=bus, local_store=store)
        first_page.mount()
        bus.publish("quantum-paradox", 15421)
        first_page.unmount()

        # Server-rendered page carrying a stale count
        back_page = LiveCounterWidget("quantum-paradox", 15420, bus=bus, local_store=store)
        back_page.mount()

        assert back_page.render() == "15,421 views"
