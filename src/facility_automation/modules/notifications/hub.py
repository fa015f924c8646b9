"""
NotificationHub - full-snapshot fan-out to observers.

Observers are plain callables receiving the snapshot dict. Delivery is
fire-and-forget: an observer that raises is logged and skipped.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from facility_automation.const import EVENT_FACILITY_CHANGED
from facility_automation.core.bus import Event, EventBus, EventFilter

logger = logging.getLogger(__name__)

Snapshot = Dict[str, Any]
Observer = Callable[[Snapshot], None]


class NotificationHub:
    """
    Registry of observers that receive the facility snapshot.

    Features:
    - Every broadcast is a full snapshot (no deltas)
    - New observers get one snapshot immediately on subscribe
    - Broadcasts iterate a copy of the registry, so observers may
      unsubscribe themselves while being notified
    """

    def __init__(self, snapshot_provider: Callable[[], Snapshot]) -> None:
        """
        Initialize the hub.

        Args:
            snapshot_provider: Returns the current snapshot (usually
                OccupancyEngine.get_snapshot)
        """
        self._snapshot_provider = snapshot_provider
        self._observers: List[Observer] = []
        self._bus: Optional[EventBus] = None

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def attach(self, bus: EventBus) -> None:
        """Broadcast whenever the engine reports a change."""
        logger.info("Attaching NotificationHub")
        self._bus = bus
        bus.subscribe(self._on_facility_changed, EventFilter(event_type=EVENT_FACILITY_CHANGED))

    def detach(self) -> None:
        if self._bus:
            self._bus.unsubscribe(self._on_facility_changed)
            self._bus = None

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register an observer and push it the current snapshot.

        Args:
            observer: Callable receiving snapshot dicts

        Returns:
            A function that unsubscribes the observer
        """
        self._observers.append(observer)
        logger.debug(f"Observer subscribed ({len(self._observers)} total)")

        self._deliver(observer, self._snapshot_provider())

        def unsubscribe() -> None:
            self.unsubscribe(observer)

        return unsubscribe

    def unsubscribe(self, observer: Observer) -> None:
        """Remove an observer. Unknown observers are ignored."""
        if observer in self._observers:
            self._observers.remove(observer)
            logger.debug(f"Observer unsubscribed ({len(self._observers)} total)")

    def broadcast(self) -> int:
        """
        Push the current snapshot to every observer.

        Returns:
            Number of observers that accepted the push
        """
        observers = list(self._observers)
        if not observers:
            return 0

        snapshot = self._snapshot_provider()
        delivered = sum(1 for observer in observers if self._deliver(observer, snapshot))
        logger.debug(f"Broadcast snapshot to {delivered}/{len(observers)} observers")
        return delivered

    def _on_facility_changed(self, event: Event) -> None:
        self.broadcast()

    def _deliver(self, observer: Observer, snapshot: Snapshot) -> bool:
        try:
            observer(snapshot)
        except Exception as e:
            logger.error(f"Error delivering snapshot to observer: {e}", exc_info=True)
            return False
        return True
