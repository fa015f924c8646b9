"""
facility-automation: occupancy-driven appliance control for a small campus.

This library provides:
- Room and appliance state with facility-wide lookups
- Occupancy automation with deferred, re-checked turn-offs
- A daily auto-shutdown check
- Full-snapshot fan-out to observers
"""

from facility_automation.core.room import Appliance, ApplianceCategory, ApplianceState, Room
from facility_automation.core.bus import Event, EventBus, EventFilter
from facility_automation.core.manager import FacilityManager
from facility_automation.core.settings import Settings, SettingsUpdate
from facility_automation.modules.occupancy import NotFound, OccupancyEngine, OccupancySource

__version__ = "0.1.0"

__all__ = [
    "Appliance",
    "ApplianceCategory",
    "ApplianceState",
    "Room",
    "Event",
    "EventBus",
    "EventFilter",
    "FacilityManager",
    "Settings",
    "SettingsUpdate",
    "NotFound",
    "OccupancyEngine",
    "OccupancySource",
]
