"""
SensorSimulator - random occupancy changes for demos.

Stands in for real occupancy sensors. It calls the engine exactly the way a
sensor integration would: set_occupancy(..., source=SENSOR).
"""

import logging
import random
from datetime import datetime
from typing import Optional

from facility_automation.modules.occupancy.engine import OccupancyEngine
from facility_automation.modules.occupancy.models import OccupancySource

logger = logging.getLogger(__name__)


class SensorSimulator:
    """
    Proposes occupancy changes on every tick.

    Each tick:
    - With probability change_probability, pick a random room
    - Propose "occupied" with probability occupied_probability
    - Report it only if it differs from the room's current state
    """

    def __init__(
        self,
        engine: OccupancyEngine,
        rng: Optional[random.Random] = None,
        change_probability: float = 0.1,
        occupied_probability: float = 0.3,
    ) -> None:
        """
        Initialize the simulator.

        Args:
            engine: Engine to report occupancy to
            rng: Random source (seed it for repeatable runs)
            change_probability: Chance per tick that a room is sampled
            occupied_probability: Chance a sampled room reads as occupied
        """
        self._engine = engine
        self._rng = rng or random.Random()
        self.change_probability = change_probability
        self.occupied_probability = occupied_probability

    def tick(self, now: Optional[datetime] = None) -> Optional[int]:
        """
        Run one simulation step.

        Returns:
            ID of the room whose occupancy changed, or None
        """
        if self._rng.random() >= self.change_probability:
            return None

        rooms = self._engine.manager.all_rooms()
        if not rooms:
            return None

        room = self._rng.choice(rooms)
        occupied = self._rng.random() < self.occupied_probability
        if occupied == room.occupied:
            return None

        self._engine.set_occupancy(room.id, occupied, source=OccupancySource.SENSOR, now=now)
        logger.info(
            f"{room.name} occupancy changed to: {'OCCUPIED' if occupied else 'UNOCCUPIED'}"
        )
        return room.id
