"""
Core components of facility-automation.

This package contains:
- bus: Event Bus implementation
- room: Room and Appliance dataclasses
- manager: FacilityManager for the room/appliance catalog
- settings: Automation settings and partial updates
- status: System status and computed statistics
"""

from facility_automation.core.room import Appliance, ApplianceCategory, ApplianceState, Room
from facility_automation.core.bus import Event, EventBus, EventFilter
from facility_automation.core.manager import FacilityManager
from facility_automation.core.settings import Settings, SettingsUpdate
from facility_automation.core.status import FacilityStats, SystemStatus

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
    "FacilityStats",
    "SystemStatus",
]
