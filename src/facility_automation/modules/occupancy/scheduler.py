"""Deferred turn-off bookkeeping.

The scheduler only remembers what should happen and when. It never touches
rooms and owns no timers: the engine decides what a due action does, and the
host decides how to wake up for it (see OccupancyEngine.get_next_timeout).

Licensed under MIT License
"""

import itertools
import logging
from datetime import datetime, timedelta

from .models import DeferredAction

_LOGGER = logging.getLogger(__name__)


class DeferredActionScheduler:
    """Pending deferred actions, ordered by fire time.

    Several actions may be pending for the same room. Scheduling a new one
    does not cancel the old ones; each is checked against live occupancy
    when it comes due.
    """

    def __init__(self) -> None:
        self._pending: list[DeferredAction] = []
        self._ids = itertools.count(1)

    def schedule_turn_off(
        self,
        room_id: int,
        delay: timedelta,
        now: datetime,
    ) -> DeferredAction:
        """Register a turn-off for a room.

        Args:
            room_id: Target room.
            delay: How long the room must stay vacant.
            now: When the room was observed vacant.

        Returns:
            The registered action.
        """
        action = DeferredAction(
            action_id=next(self._ids),
            room_id=room_id,
            created_at=now,
            fire_at=now + delay,
        )
        self._pending.append(action)
        self._pending.sort(key=lambda a: (a.fire_at, a.action_id))

        _LOGGER.debug(
            f"Scheduled turn-off #{action.action_id} for room {room_id} at {action.fire_at}"
        )
        return action

    def pop_due(self, now: datetime) -> list[DeferredAction]:
        """Remove and return every action whose fire time has passed.

        Args:
            now: Current datetime.

        Returns:
            Due actions, earliest first.
        """
        due = [a for a in self._pending if a.fire_at <= now]
        if due:
            self._pending = [a for a in self._pending if a.fire_at > now]
        return due

    def next_expiration(self) -> datetime | None:
        """Earliest pending fire time, or None if nothing is pending."""
        if not self._pending:
            return None
        return self._pending[0].fire_at

    def pending(self, room_id: int | None = None) -> list[DeferredAction]:
        """Pending actions, optionally for a single room."""
        if room_id is None:
            return list(self._pending)
        return [a for a in self._pending if a.room_id == room_id]

    def clear(self) -> int:
        """Drop every pending action.

        Returns:
            Number of actions dropped.
        """
        count = len(self._pending)
        self._pending = []
        return count
