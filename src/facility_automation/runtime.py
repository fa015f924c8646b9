"""asyncio host for the occupancy engine.

The engine is time-agnostic; this module supplies the clock. It keeps one
wake-up armed for the earliest pending turn-off and runs the periodic daily
shutdown check and sensor simulation. stop() cancels all of it.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import random
from datetime import datetime, UTC
from typing import TYPE_CHECKING

from .config import FacilityConfig
from .const import EVENT_ACTION_SCHEDULED
from .core.bus import Event, EventBus, EventFilter
from .core.catalog import build_default_catalog
from .modules.notifications import NotificationHub
from .modules.occupancy import OccupancyEngine
from .modules.sensors import SensorSimulator
from .modules.shutdown import DailyShutdownChecker

if TYPE_CHECKING:
    from collections.abc import Callable

    from .core.manager import FacilityManager

_LOGGER = logging.getLogger(__name__)


class FacilityRuntime:
    """Wires the engine to an event loop.

    Owns:
    - the wake-up TimerHandle for the next deferred turn-off
    - the periodic daily shutdown check task
    - the periodic sensor simulation task (optional)
    """

    def __init__(
        self,
        engine: OccupancyEngine,
        bus: EventBus,
        hub: NotificationHub,
        checker: DailyShutdownChecker,
        simulator: SensorSimulator | None = None,
        config: FacilityConfig | None = None,
    ) -> None:
        self.engine = engine
        self.bus = bus
        self.hub = hub
        self.checker = checker
        self.simulator = simulator
        self.config = config or FacilityConfig()

        self._loop: asyncio.AbstractEventLoop | None = None
        self._wakeup: asyncio.TimerHandle | None = None
        self._tasks: list[asyncio.Task[None]] = []
        self._running = False

    @classmethod
    def create(
        cls,
        config: FacilityConfig | None = None,
        manager: FacilityManager | None = None,
        rng: random.Random | None = None,
    ) -> FacilityRuntime:
        """Build a runtime with its engine, hub, checker and simulator.

        Args:
            config: Startup options (defaults if None).
            manager: Room catalog (the demo catalog if None).
            rng: Random source for the sensor simulator.

        """
        config = config or FacilityConfig()
        bus = EventBus()
        engine = OccupancyEngine(manager or build_default_catalog(), bus)

        hub = NotificationHub(engine.get_snapshot)
        hub.attach(bus)

        simulator = SensorSimulator(engine, rng=rng) if config.simulate_sensors else None
        return cls(
            engine,
            bus,
            hub,
            DailyShutdownChecker(engine),
            simulator=simulator,
            config=config,
        )

    @property
    def running(self) -> bool:
        return self._running

    @property
    def next_wakeup(self) -> float | None:
        """Loop time of the armed wake-up, or None."""
        if self._wakeup is None or self._wakeup.cancelled():
            return None
        return self._wakeup.when()

    async def async_start(self) -> None:
        """Start timers and periodic tasks on the running loop."""
        if self._running:
            _LOGGER.debug("Runtime already started")
            return

        self._loop = asyncio.get_running_loop()
        self._running = True
        self.bus.subscribe(self._on_action_scheduled, EventFilter(event_type=EVENT_ACTION_SCHEDULED))

        self._tasks.append(
            asyncio.create_task(
                self._run_periodic("shutdown", self.config.check_interval, self.checker.check)
            )
        )
        if self.simulator is not None:
            self._tasks.append(
                asyncio.create_task(
                    self._run_periodic("sensors", self.config.sensor_interval, self.simulator.tick)
                )
            )

        self._arm_wakeup()
        _LOGGER.info(
            "Runtime started (shutdown check every %ss, sensors %s)",
            self.config.check_interval,
            "simulated" if self.simulator else "off",
        )

    async def async_stop(self) -> None:
        """Cancel every timer and task. Pending turn-offs are dropped."""
        if not self._running:
            return

        self._running = False
        self.bus.unsubscribe(self._on_action_scheduled)

        if self._wakeup is not None:
            self._wakeup.cancel()
            self._wakeup = None

        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._tasks = []

        self.engine.cancel_pending_actions()
        _LOGGER.info("Runtime stopped")

    def _on_action_scheduled(self, event: Event) -> None:
        # Engine calls may come from other threads; the handle belongs to the loop
        if self._loop is not None and self._running:
            self._loop.call_soon_threadsafe(self._arm_wakeup)

    def _arm_wakeup(self) -> None:
        """(Re)arm the single wake-up for the earliest pending turn-off."""
        if not self._running or self._loop is None:
            return

        if self._wakeup is not None:
            self._wakeup.cancel()
            self._wakeup = None

        next_timeout = self.engine.get_next_timeout()
        if next_timeout is None:
            return

        delay = max(0.0, (next_timeout - datetime.now(UTC)).total_seconds())
        self._wakeup = self._loop.call_later(delay, self._on_wakeup)
        _LOGGER.debug("Next turn-off check in %.1fs (at %s)", delay, next_timeout)

    def _on_wakeup(self) -> None:
        self._wakeup = None
        try:
            result = self.engine.check_timeouts(datetime.now(UTC))
            if result.fired or result.skipped:
                _LOGGER.debug(
                    "Wake-up: %d turn-off(s) fired, %d dropped",
                    len(result.fired),
                    len(result.skipped),
                )
        except Exception:
            _LOGGER.exception("Error running deferred turn-offs")
        finally:
            self._arm_wakeup()

    async def _run_periodic(self, name: str, interval: float, tick: Callable[[], object]) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                tick()
            except Exception:
                _LOGGER.exception("Error in periodic %s task", name)
