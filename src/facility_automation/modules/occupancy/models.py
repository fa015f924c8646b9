"""Data models for the occupancy module.

Deferred actions and results are frozen so the engine can hand them to the
host without copying.

Licensed under MIT License
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class OccupancySource(Enum):
    """Where an occupancy change came from.

    MANUAL: Dashboard or API request
    SENSOR: Occupancy sensor (lights are switched on when the room fills)
    """

    MANUAL = "manual"
    SENSOR = "sensor"


@dataclass(frozen=True)
class DeferredAction:
    """A pending "switch everything off" for one room.

    The action does not own the room's fate: when it fires, the engine
    re-reads occupancy and drops the action if the room is occupied again.

    Attributes:
        action_id: Monotonic id, unique per scheduler.
        room_id: Target room.
        created_at: When the room was observed vacant.
        fire_at: Earliest time the action may run.
    """

    action_id: int
    room_id: int
    created_at: datetime
    fire_at: datetime


@dataclass(frozen=True)
class NotFound:
    """Lookup failure for an unknown room or appliance id."""

    entity: str
    id: int

    @property
    def message(self) -> str:
        return f"{self.entity.capitalize()} not found"


@dataclass(frozen=True)
class ActivityEntry:
    """One line of the activity log."""

    timestamp: datetime
    message: str
    room_id: int | None = None

    def to_dict(self) -> dict:
        return {"timestamp": self.timestamp.isoformat(), "message": self.message}


@dataclass(frozen=True)
class EngineResult:
    """Outcome of a timeout check, plus when the host should wake next."""

    next_expiration: datetime | None
    fired: list[DeferredAction] = field(default_factory=list)
    skipped: list[DeferredAction] = field(default_factory=list)
