"""System status and computed facility statistics."""

from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Any, Dict, Iterable

from facility_automation.core.room import Room

# Estimated draw of a single appliance, used for the energy-saved figure
WATTS_PER_APPLIANCE = 50


def _utc_now() -> datetime:
    """Get current UTC time (for default factory)."""
    return datetime.now(UTC)


@dataclass
class SystemStatus:
    """Liveness flag and the time of the last state change."""

    online: bool = True
    last_update_at: datetime = field(default_factory=_utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "online": self.online,
            "lastUpdateAt": self.last_update_at.isoformat(),
        }


@dataclass(frozen=True)
class FacilityStats:
    """Aggregate counters. Always computed, never stored."""

    total_rooms: int = 0
    occupied_rooms: int = 0
    total_appliances: int = 0
    active_appliances: int = 0

    @property
    def energy_saved(self) -> int:
        """Estimated watts saved by appliances that are off."""
        return max(0, self.total_appliances - self.active_appliances) * WATTS_PER_APPLIANCE

    @classmethod
    def from_rooms(cls, rooms: Iterable[Room]) -> "FacilityStats":
        total_rooms = occupied_rooms = total_appliances = active_appliances = 0
        for room in rooms:
            total_rooms += 1
            if room.occupied:
                occupied_rooms += 1
            total_appliances += len(room.appliances)
            active_appliances += sum(1 for a in room.appliances if a.is_on)

        return cls(
            total_rooms=total_rooms,
            occupied_rooms=occupied_rooms,
            total_appliances=total_appliances,
            active_appliances=active_appliances,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRooms": self.total_rooms,
            "occupiedRooms": self.occupied_rooms,
            "totalAppliances": self.total_appliances,
            "activeAppliances": self.active_appliances,
            "energySaved": self.energy_saved,
        }
