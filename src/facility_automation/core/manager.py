"""
FacilityManager for the room and appliance catalog.

The FacilityManager owns the catalog, not the behavior.
"""

from typing import Dict, List, Optional, Tuple
import logging

from facility_automation.core.room import (
    Appliance,
    ApplianceCategory,
    ApplianceState,
    Room,
)

logger = logging.getLogger(__name__)


class FacilityManager:
    """
    Manages the rooms of a facility and the appliances they own.

    Responsibilities:
    - Store rooms in creation order
    - Enforce facility-wide unique room and appliance ids
    - Provide room and global appliance lookups

    Does NOT implement occupancy, scheduling, or notification logic.
    """

    def __init__(self) -> None:
        """Initialize an empty facility."""
        self._rooms: Dict[int, Room] = {}
        self._appliance_to_room: Dict[int, int] = {}

    def create_room(
        self,
        id: int,
        name: str,
        occupied: bool = False,
    ) -> Room:
        """
        Create a new room in the facility.

        Args:
            id: Unique identifier
            name: Human-readable name
            occupied: Initial occupancy

        Returns:
            The created Room

        Raises:
            ValueError: If a room with this id already exists
        """
        if id in self._rooms:
            raise ValueError(f"Room with id '{id}' already exists")

        room = Room(id=id, name=name, occupied=occupied)
        self._rooms[id] = room
        logger.info(f"Created room: {id} ({name})")

        return room

    def add_appliance(
        self,
        room_id: int,
        id: int,
        name: str,
        category: ApplianceCategory = ApplianceCategory.OTHER,
        state: ApplianceState = ApplianceState.OFF,
        icon: str = "",
    ) -> Appliance:
        """
        Add an appliance to a room.

        Args:
            room_id: Owning room
            id: Appliance id, unique across the whole facility
            name: Human-readable name
            category: Appliance category
            state: Initial power state
            icon: Optional display glyph

        Returns:
            The created Appliance

        Raises:
            ValueError: If the room doesn't exist or the appliance id is taken
        """
        room = self.get_room(room_id)
        if not room:
            raise ValueError(f"Room '{room_id}' does not exist")

        if id in self._appliance_to_room:
            owner = self._appliance_to_room[id]
            raise ValueError(f"Appliance with id '{id}' already exists in room '{owner}'")

        appliance = Appliance(id=id, name=name, category=category, state=state, icon=icon)
        room.appliances.append(appliance)
        self._appliance_to_room[id] = room_id
        logger.debug(f"Added appliance {id} ({name}) to room {room_id}")

        return appliance

    def get_room(self, room_id: int) -> Optional[Room]:
        """
        Get a room by id.

        Args:
            room_id: The room id

        Returns:
            The Room or None if not found
        """
        return self._rooms.get(room_id)

    def all_rooms(self) -> List[Room]:
        """
        Get all rooms.

        Returns:
            List of all rooms, in creation order
        """
        return list(self._rooms.values())

    def find_appliance(self, appliance_id: int) -> Optional[Tuple[Room, Appliance]]:
        """
        Find an appliance anywhere in the facility.

        Rooms are searched in creation order, then appliances in display
        order; the first match wins.

        Args:
            appliance_id: The appliance id

        Returns:
            (room, appliance) or None if not found
        """
        for room in self._rooms.values():
            appliance = room.get_appliance(appliance_id)
            if appliance:
                return room, appliance
        return None
