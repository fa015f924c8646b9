"""Tests for NotificationHub."""

from datetime import datetime, UTC

import pytest

from facility_automation import ApplianceState
from facility_automation.modules.notifications import NotificationHub

T0 = datetime(2025, 1, 15, 9, 0, 0, tzinfo=UTC)


@pytest.fixture
def hub(engine, bus):
    hub = NotificationHub(engine.get_snapshot)
    hub.attach(bus)
    return hub


class TestSubscription:
    """Tests for observer registration."""

    def test_subscribe_pushes_snapshot(self, hub):
        received = []
        hub.subscribe(received.append)

        assert len(received) == 1
        assert set(received[0]) == {"rooms", "settings", "stats", "systemStatus"}
        assert hub.observer_count == 1

    def test_unsubscribe(self, hub, engine):
        received = []
        unsubscribe = hub.subscribe(received.append)
        unsubscribe()

        engine.emergency_shutdown(now=T0)

        assert len(received) == 1
        assert hub.observer_count == 0

    def test_unsubscribe_unknown_observer(self, hub):
        hub.unsubscribe(lambda snapshot: None)
        assert hub.observer_count == 0


class TestBroadcast:
    """Tests for fan-out."""

    def test_engine_change_reaches_all_observers(self, hub, engine):
        first, second = [], []
        hub.subscribe(first.append)
        hub.subscribe(second.append)

        engine.control_appliance(20, ApplianceState.ON, now=T0)

        assert len(first) == 2
        assert len(second) == 2
        assert first[-1]["stats"]["activeAppliances"] == 3

    def test_not_found_does_not_broadcast(self, hub, engine):
        received = []
        hub.subscribe(received.append)

        engine.control_appliance(999, ApplianceState.ON, now=T0)

        assert len(received) == 1

    def test_failing_observer_is_skipped(self, hub):
        received = []

        def broken(snapshot):
            raise ConnectionError("client went away")

        hub.subscribe(broken)
        hub.subscribe(received.append)

        assert hub.broadcast() == 1
        assert len(received) == 2

    def test_observer_can_unsubscribe_during_broadcast(self, hub):
        received = []

        def once(snapshot):
            received.append(snapshot)
            hub.unsubscribe(once)

        hub._observers.append(once)
        other = []
        hub.subscribe(other.append)

        assert hub.broadcast() == 2
        assert hub.broadcast() == 1
        assert len(received) == 1

    def test_broadcast_without_observers(self, hub):
        assert hub.broadcast() == 0

    def test_detach(self, hub, engine):
        received = []
        hub.subscribe(received.append)
        hub.detach()

        engine.emergency_shutdown(now=T0)

        assert len(received) == 1
