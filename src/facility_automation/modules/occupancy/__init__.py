"""
Occupancy module for facility-automation.

Owns room and appliance state and turns occupancy changes into appliance
control.

Features:
- Lights on when a sensor reports a room as newly occupied
- Deferred turn-off after the inactivity window, re-checked when due
- Several pending turn-offs per room, each checked independently
- Time-agnostic: the host drives timeouts via check_timeouts(now)
- Activity log of recent automation
"""

from .models import (
    ActivityEntry,
    DeferredAction,
    EngineResult,
    NotFound,
    OccupancySource,
)
from .scheduler import DeferredActionScheduler
from .engine import OccupancyEngine

__all__ = [
    "OccupancyEngine",
    "DeferredActionScheduler",
    "DeferredAction",
    "OccupancySource",
    "NotFound",
    "ActivityEntry",
    "EngineResult",
]
