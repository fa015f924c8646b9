"""Shared fixtures for facility-automation tests."""

import pytest

from facility_automation import (
    ApplianceCategory,
    ApplianceState,
    EventBus,
    FacilityManager,
    OccupancyEngine,
)
from facility_automation.const import EVENT_ACTION_SCHEDULED, EVENT_FACILITY_CHANGED



class EventRecorder:
    """Records every event published on a bus."""

    def __init__(self, bus):
        self.events = []
        bus.subscribe(self.events.append)

    @property
    def changed(self):
        return [e for e in self.events if e.type == EVENT_FACILITY_CHANGED]

    @property
    def scheduled(self):
        return [e for e in self.events if e.type == EVENT_ACTION_SCHEDULED]

    def clear(self):
        self.events.clear()


@pytest.fixture
def manager():
    """Lab with 3 appliances (2 on) and an Office with 2 (all off)."""
    mgr = FacilityManager()

    mgr.create_room(id=1, name="Lab")
    mgr.add_appliance(
        1, id=10, name="Lights", category=ApplianceCategory.LIGHT, state=ApplianceState.ON
    )
    mgr.add_appliance(
        1, id=11, name="Computers", category=ApplianceCategory.COMPUTER, state=ApplianceState.ON
    )
    mgr.add_appliance(1, id=12, name="AC", category=ApplianceCategory.CLIMATE)

    mgr.create_room(id=2, name="Office")
    mgr.add_appliance(2, id=20, name="Lights", category=ApplianceCategory.LIGHT)
    mgr.add_appliance(2, id=21, name="Computer", category=ApplianceCategory.COMPUTER)

    return mgr


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def recorder(bus):
    return EventRecorder(bus)


@pytest.fixture
def engine(manager, bus):
    return OccupancyEngine(manager, bus)
