"""The Core Logic Engine for occupancy-driven automation.

This module owns the facility state (rooms, appliances, settings, status)
and applies the automation policy:

- Room becomes occupied (sensor): lights on immediately
- Room becomes vacant: schedule a turn-off after the inactivity window
- Turn-off comes due: switch everything off, unless the room is occupied again

The engine is time-agnostic. Every operation accepts `now`, and the engine
never sleeps or arms timers itself. The host is responsible for:
1. Calling check_timeouts(now) when get_next_timeout() comes due
2. Re-arming its wake-up when a "deferred_action.scheduled" event is published

Licensed under MIT License
"""

import logging
import threading
from collections import deque
from datetime import datetime, timedelta, UTC
from typing import Any, Deque

from facility_automation.const import EVENT_ACTION_SCHEDULED, EVENT_FACILITY_CHANGED
from facility_automation.core.bus import Event, EventBus
from facility_automation.core.manager import FacilityManager
from facility_automation.core.room import (
    Appliance,
    ApplianceCategory,
    ApplianceState,
    Room,
)
from facility_automation.core.settings import (
    MAX_INACTIVITY_MINUTES,
    Settings,
    SettingsUpdate,
)
from facility_automation.core.status import FacilityStats, SystemStatus

from .models import (
    ActivityEntry,
    DeferredAction,
    EngineResult,
    NotFound,
    OccupancySource,
)
from .scheduler import DeferredActionScheduler

_LOGGER = logging.getLogger(__name__)


class OccupancyEngine:
    """The single owner of mutable facility state.

    All mutations happen under one re-entrant lock, together with the
    scheduling they imply. Events are published after the lock is released,
    so observers never run while state is half-applied.
    """

    ACTIVITY_LOG_SIZE = 100  # Number of activity entries to keep

    def __init__(
        self,
        manager: FacilityManager,
        bus: EventBus,
        settings: Settings | None = None,
        status: SystemStatus | None = None,
    ) -> None:
        """Initialize the engine over an existing catalog.

        Args:
            manager: Room and appliance catalog.
            bus: Bus that change events are published on.
            settings: Initial settings (defaults if None).
            status: Initial system status (online, now if None).
        """
        self._manager = manager
        self._bus = bus
        self._settings = settings or Settings()
        self._status = status or SystemStatus()
        self._scheduler = DeferredActionScheduler()
        self._lock = threading.RLock()

        # Activity log (ring buffer)
        self._activity: Deque[ActivityEntry] = deque(maxlen=self.ACTIVITY_LOG_SIZE)

    @property
    def manager(self) -> FacilityManager:
        return self._manager

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def status(self) -> SystemStatus:
        return self._status

    @property
    def scheduler(self) -> DeferredActionScheduler:
        return self._scheduler

    # =========================================================================
    # Occupancy
    # =========================================================================

    def set_occupancy(
        self,
        room_id: int,
        occupied: bool,
        source: OccupancySource = OccupancySource.MANUAL,
        now: datetime | None = None,
    ) -> Room | NotFound:
        """Record a room's occupancy and apply the automation policy.

        The write and the broadcast happen even if the value is unchanged.
        Every vacant write schedules its own turn-off.

        Args:
            room_id: Target room.
            occupied: New occupancy.
            source: MANUAL or SENSOR. A sensor reporting a newly occupied
                room also switches its lights on.
            now: Current datetime.

        Returns:
            The updated Room, or NotFound.
        """
        if now is None:
            now = datetime.now(UTC)

        action: DeferredAction | None = None

        with self._lock:
            room = self._manager.get_room(room_id)
            if not room:
                _LOGGER.warning(f"Occupancy update for unknown room: {room_id}")
                return NotFound("room", room_id)

            # Schedule first so a failure leaves the room untouched
            if not occupied:
                action = self._scheduler.schedule_turn_off(room.id, self._inactivity_delay(), now)

            was_occupied = room.occupied
            room.occupied = occupied
            room.last_activity_at = now if occupied else None

            if occupied and source == OccupancySource.SENSOR and not was_occupied:
                lights = self._set_category_state(room, ApplianceCategory.LIGHT, ApplianceState.ON)
                self._record(now, f"{room.name} - Motion detected, lights turned ON", room.id)
                _LOGGER.info(f"  {room.id}: {lights} light(s) switched on by sensor")

            self._status.last_update_at = now

        _LOGGER.info(
            f"Occupancy {room.name}: {'OCCUPIED' if was_occupied else 'VACANT'} -> "
            f"{'OCCUPIED' if occupied else 'VACANT'} (source={source.value})"
        )

        if action:
            self._bus.publish(
                Event(
                    type=EVENT_ACTION_SCHEDULED,
                    source="occupancy",
                    room_id=room.id,
                    payload={
                        "action_id": action.action_id,
                        "fire_at": action.fire_at.isoformat(),
                    },
                    timestamp=now,
                )
            )

        self._publish_changed("occupancy", now, room_id=room.id)
        return room

    def check_timeouts(self, now: datetime | None = None) -> EngineResult:
        """Run every deferred turn-off that has come due.

        A due action re-reads the room's occupancy. If the room is vacant,
        all of its appliances are switched off; if it is occupied again the
        action is dropped. Nothing is retried or rescheduled.

        Args:
            now: Current datetime.

        Returns:
            EngineResult with fired/skipped actions and next expiration time.
        """
        if now is None:
            now = datetime.now(UTC)

        fired: list[DeferredAction] = []
        skipped: list[DeferredAction] = []

        with self._lock:
            for action in self._scheduler.pop_due(now):
                room = self._manager.get_room(action.room_id)
                if room is None:
                    _LOGGER.warning(
                        f"  Turn-off #{action.action_id}: room {action.room_id} is gone, dropped"
                    )
                    skipped.append(action)
                    continue

                if room.occupied:
                    _LOGGER.debug(
                        f"  Turn-off #{action.action_id}: {room.name} occupied again, dropped"
                    )
                    skipped.append(action)
                    continue

                switched = room.turn_all_off()
                fired.append(action)
                self._status.last_update_at = now
                self._record(
                    now,
                    f"{room.name} - No motion for {self._minutes_between(action)} minutes, "
                    f"appliances turned OFF",
                    room.id,
                )
                _LOGGER.info(
                    f"  Turn-off #{action.action_id}: {room.name} vacant, "
                    f"{switched} appliance(s) switched off"
                )

            next_expiration = self._scheduler.next_expiration()

        for action in fired:
            self._publish_changed("occupancy", now, room_id=action.room_id)

        return EngineResult(next_expiration=next_expiration, fired=fired, skipped=skipped)

    def get_next_timeout(self) -> datetime | None:
        """When the host should next call check_timeouts(), or None."""
        with self._lock:
            return self._scheduler.next_expiration()

    def cancel_pending_actions(self) -> int:
        """Drop every pending turn-off (used at shutdown)."""
        with self._lock:
            count = self._scheduler.clear()
        if count:
            _LOGGER.info(f"Dropped {count} pending turn-off(s)")
        return count

    # =========================================================================
    # Appliances
    # =========================================================================

    def control_appliance(
        self,
        appliance_id: int,
        state: ApplianceState,
        now: datetime | None = None,
    ) -> Appliance | NotFound:
        """Switch one appliance, looked up across all rooms.

        No occupancy side effects.

        Args:
            appliance_id: Target appliance.
            state: New power state.
            now: Current datetime.

        Returns:
            The updated Appliance, or NotFound (nothing is broadcast).
        """
        if now is None:
            now = datetime.now(UTC)

        with self._lock:
            found = self._manager.find_appliance(appliance_id)
            if not found:
                _LOGGER.warning(f"Control request for unknown appliance: {appliance_id}")
                return NotFound("appliance", appliance_id)

            room, appliance = found
            appliance.state = state
            self._status.last_update_at = now
            self._record(
                now,
                f"{room.name} - {appliance.name} manually turned {state.value.upper()}",
                room.id,
            )

        _LOGGER.info(f"{appliance.name} in {room.name} turned {state.value.upper()}")
        self._publish_changed("control", now, room_id=room.id, appliance_id=appliance.id)
        return appliance

    def emergency_shutdown(self, now: datetime | None = None) -> int:
        """Switch every appliance in every room off.

        Returns:
            Number of appliances that were on.
        """
        _LOGGER.warning("EMERGENCY SHUTDOWN ACTIVATED")
        return self.force_all_off("emergency", now=now)

    def force_all_off(self, source: str, now: datetime | None = None) -> int:
        """Switch every appliance off and broadcast.

        Args:
            source: Who asked (e.g. "emergency", "auto_shutdown").
            now: Current datetime.

        Returns:
            Number of appliances that were on.
        """
        if now is None:
            now = datetime.now(UTC)

        with self._lock:
            switched = sum(room.turn_all_off() for room in self._manager.all_rooms())
            self._status.last_update_at = now
            self._record(now, f"System - All appliances turned OFF ({source})")

        _LOGGER.info(f"All appliances off ({source}): {switched} were on")
        self._publish_changed(source, now)
        return switched

    # =========================================================================
    # Settings
    # =========================================================================

    def update_settings(self, update: SettingsUpdate, now: datetime | None = None) -> Settings:
        """Apply a partial settings change and broadcast.

        Pending turn-offs keep the delay they were scheduled with.

        Args:
            update: Fields to change (falsy fields are left alone).
            now: Current datetime.

        Returns:
            The current settings.
        """
        if now is None:
            now = datetime.now(UTC)

        with self._lock:
            applied = update.apply_to(self._settings)
            self._status.last_update_at = now
            self._record(now, "System - Settings updated by admin")

        _LOGGER.info(f"Settings updated: {applied or 'no changes'}")
        self._publish_changed("settings", now)
        return self._settings

    # =========================================================================
    # Queries
    # =========================================================================

    def get_room(self, room_id: int) -> Room | NotFound:
        room = self._manager.get_room(room_id)
        if not room:
            return NotFound("room", room_id)
        return room

    def get_stats(self) -> FacilityStats:
        with self._lock:
            return FacilityStats.from_rooms(self._manager.all_rooms())

    def get_snapshot(self) -> dict[str, Any]:
        """Full facility state, as pushed to observers.

        Returns:
            dict: {"rooms": [...], "settings": {...}, "stats": {...},
                "systemStatus": {...}}
        """
        with self._lock:
            rooms = self._manager.all_rooms()
            return {
                "rooms": [room.to_dict() for room in rooms],
                "settings": self._settings.to_dict(),
                "stats": FacilityStats.from_rooms(rooms).to_dict(),
                "systemStatus": self._status.to_dict(),
            }

    def get_activity_log(self, limit: int | None = None) -> list[ActivityEntry]:
        """Recent activity, newest first."""
        with self._lock:
            entries = list(reversed(self._activity))
        if limit is not None:
            entries = entries[:limit]
        return entries

    # =========================================================================
    # Internals
    # =========================================================================

    def _set_category_state(
        self,
        room: Room,
        category: ApplianceCategory,
        state: ApplianceState,
    ) -> int:
        count = 0
        for appliance in room.appliances:
            if appliance.category == category:
                appliance.state = state
                count += 1
        return count

    def _inactivity_delay(self) -> timedelta:
        minutes = min(self._settings.inactivity_minutes, MAX_INACTIVITY_MINUTES)
        return timedelta(minutes=minutes)

    def _minutes_between(self, action: DeferredAction) -> int:
        return int((action.fire_at - action.created_at).total_seconds() // 60)

    def _record(self, now: datetime, message: str, room_id: int | None = None) -> None:
        self._activity.append(ActivityEntry(timestamp=now, message=message, room_id=room_id))

    def _publish_changed(
        self,
        reason: str,
        now: datetime,
        room_id: int | None = None,
        appliance_id: int | None = None,
    ) -> None:
        self._bus.publish(
            Event(
                type=EVENT_FACILITY_CHANGED,
                source="occupancy",
                room_id=room_id,
                appliance_id=appliance_id,
                payload={"reason": reason},
                timestamp=now,
            )
        )
