"""
Room and appliance dataclasses.

A Room is a physical space in the facility: a classroom, lab, or office.
Each Room owns an ordered list of Appliances. Appliance ids are unique across
the whole facility so an appliance can be found without knowing its room.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class ApplianceCategory(Enum):
    """What kind of load an appliance is."""

    LIGHT = "light"
    CLIMATE = "climate-control"
    COMPUTER = "computer"
    OTHER = "other"


class ApplianceState(Enum):
    """Power state of an appliance."""

    ON = "on"
    OFF = "off"


@dataclass
class Appliance:
    """
    A controllable load inside a room.

    Attributes:
        id: Unique identifier (unique across all rooms)
        name: Human-readable name
        category: Appliance category (only LIGHT is special-cased by automation)
        state: Current power state
        icon: Optional display glyph for dashboards
    """

    id: int
    name: str
    category: ApplianceCategory = ApplianceCategory.OTHER
    state: ApplianceState = ApplianceState.OFF
    icon: str = ""

    @property
    def is_on(self) -> bool:
        return self.state == ApplianceState.ON

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "state": self.state.value,
            "icon": self.icon,
        }


@dataclass
class Room:
    """
    A room in the facility.

    Attributes:
        id: Unique identifier for this room
        name: Human-readable name
        occupied: Whether the room is currently occupied
        last_activity_at: Set on every occupancy transition; the transition
            time when it became occupied, None when it became vacant
        appliances: Appliances owned by this room, in display order
    """

    id: int
    name: str
    occupied: bool = False
    last_activity_at: Optional[datetime] = None
    appliances: List[Appliance] = field(default_factory=list)

    def get_appliance(self, appliance_id: int) -> Optional[Appliance]:
        """Find an appliance in this room by id."""
        for appliance in self.appliances:
            if appliance.id == appliance_id:
                return appliance
        return None

    def turn_all_off(self) -> int:
        """
        Switch every appliance in the room off.

        Returns:
            Number of appliances that were on before the call
        """
        switched = 0
        for appliance in self.appliances:
            if appliance.is_on:
                switched += 1
            appliance.state = ApplianceState.OFF
        return switched

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "occupied": self.occupied,
            "lastActivityAt": (
                self.last_activity_at.isoformat() if self.last_activity_at else None
            ),
            "appliances": [a.to_dict() for a in self.appliances],
        }
