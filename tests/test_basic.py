"""
Basic smoke tests for facility-automation core components.
"""

import pytest

from facility_automation import (
    Appliance,
    ApplianceCategory,
    ApplianceState,
    Event,
    EventBus,
    EventFilter,
    FacilityManager,
    Room,
)
from facility_automation.core.catalog import build_default_catalog
from facility_automation.core.status import FacilityStats


def test_room_creation():
    """Test basic Room dataclass creation."""
    room = Room(id=1, name="Classroom")
    assert room.id == 1
    assert room.name == "Classroom"
    assert room.occupied is False
    assert room.last_activity_at is None
    assert room.appliances == []


def test_appliance_defaults():
    """Test Appliance defaults and serialization."""
    appliance = Appliance(id=3, name="Lights", category=ApplianceCategory.LIGHT)
    assert appliance.state == ApplianceState.OFF
    assert appliance.is_on is False
    assert appliance.to_dict() == {
        "id": 3,
        "name": "Lights",
        "category": "light",
        "state": "off",
        "icon": "",
    }


def test_manager_create_room():
    """Test FacilityManager room creation and retrieval."""
    mgr = FacilityManager()

    lab = mgr.create_room(id=2, name="ICT Lab")
    office = mgr.create_room(id=3, name="Office")

    assert mgr.get_room(2) == lab
    assert mgr.get_room(3) == office
    assert mgr.get_room(99) is None
    assert [r.id for r in mgr.all_rooms()] == [2, 3]


def test_manager_rejects_duplicate_room():
    """Test duplicate room ids raise."""
    mgr = FacilityManager()
    mgr.create_room(id=1, name="Classroom")

    with pytest.raises(ValueError, match="already exists"):
        mgr.create_room(id=1, name="Another")


def test_manager_appliance_ids_unique_across_rooms():
    """Test appliance ids are unique facility-wide, not just per room."""
    mgr = FacilityManager()
    mgr.create_room(id=1, name="Classroom")
    mgr.create_room(id=2, name="Office")
    mgr.add_appliance(1, id=7, name="Lights")

    with pytest.raises(ValueError, match="already exists"):
        mgr.add_appliance(2, id=7, name="Computer")


def test_manager_add_appliance_unknown_room():
    """Test adding an appliance to a missing room raises."""
    mgr = FacilityManager()
    with pytest.raises(ValueError, match="does not exist"):
        mgr.add_appliance(5, id=1, name="Lights")


def test_manager_find_appliance_across_rooms():
    """Test global appliance lookup returns the owning room."""
    mgr = FacilityManager()
    mgr.create_room(id=1, name="Classroom")
    mgr.create_room(id=2, name="Office")
    mgr.add_appliance(1, id=1, name="Lights")
    computer = mgr.add_appliance(2, id=2, name="Computer")

    room, appliance = mgr.find_appliance(2)
    assert room.id == 2
    assert appliance is computer
    assert mgr.find_appliance(42) is None


def test_room_turn_all_off():
    """Test switching a room off reports how many were on."""
    room = Room(
        id=1,
        name="Lab",
        appliances=[
            Appliance(id=1, name="Lights", state=ApplianceState.ON),
            Appliance(id=2, name="AC"),
        ],
    )
    assert room.turn_all_off() == 1
    assert all(a.state == ApplianceState.OFF for a in room.appliances)


def test_stats_energy_saved():
    """Test energy saved is 50 W per appliance that is off."""
    mgr = build_default_catalog()
    stats = FacilityStats.from_rooms(mgr.all_rooms())

    assert stats.total_rooms == 3
    assert stats.occupied_rooms == 1
    assert stats.total_appliances == 7
    assert stats.active_appliances == 3
    assert stats.energy_saved == (7 - 3) * 50
    assert stats.to_dict()["energySaved"] == 200


def test_default_catalog():
    """Test the demo catalog matches the campus layout."""
    mgr = build_default_catalog()

    assert [r.name for r in mgr.all_rooms()] == ["Classroom", "ICT Lab", "Office"]
    lab = mgr.get_room(2)
    assert lab.occupied is True
    assert lab.last_activity_at is not None
    assert [a.id for _, a in mgr.iter_appliances()] == [1, 2, 3, 4, 5, 6, 7]


def test_event_bus():
    """Test EventBus publish/subscribe."""
    bus = EventBus()
    received = []

    def handler(event):
        received.append(event)

    bus.subscribe(handler)

    event = Event(type="facility.changed", source="test", room_id=1)
    bus.publish(event)

    assert len(received) == 1
    assert received[0] == event


def test_event_filter_room():
    """Test room filters let facility-wide events through."""
    event_filter = EventFilter(event_type="facility.changed", room_id=1)

    assert event_filter.matches(Event(type="facility.changed", source="t", room_id=1))
    assert not event_filter.matches(Event(type="facility.changed", source="t", room_id=2))
    assert event_filter.matches(Event(type="facility.changed", source="t"))
    assert not event_filter.matches(Event(type="other", source="t", room_id=1))


def test_event_bus_error_isolation():
    """Test that handler errors don't crash the bus."""
    bus = EventBus()
    received = []

    def bad_handler(event):
        raise ValueError("Intentional error")

    def good_handler(event):
        received.append(event)

    bus.subscribe(bad_handler)
    bus.subscribe(good_handler)

    bus.publish(Event(type="test", source="test"))

    assert len(received) == 1


def test_event_bus_unsubscribe():
    """Test unsubscribed handlers stop receiving events."""
    bus = EventBus()
    received = []
    bus.subscribe(received.append)
    bus.unsubscribe(received.append)

    bus.publish(Event(type="test", source="test"))
    assert received == []
