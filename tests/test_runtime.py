"""Tests for the asyncio runtime host."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from facility_automation import ApplianceState
from facility_automation.config import FacilityConfig
from facility_automation.runtime import FacilityRuntime


@pytest.fixture
def runtime(manager) -> FacilityRuntime:
    """Create a runtime without sensor simulation."""
    config = FacilityConfig(simulate_sensors=False, check_interval=0.01)
    return FacilityRuntime.create(config, manager=manager)


class TestRuntimeLifecycle:
    """Tests for start/stop."""

    def test_create_wires_components(self, runtime: FacilityRuntime) -> None:
        """Test the factory builds hub, checker and no simulator."""
        assert runtime.simulator is None
        assert runtime.running is False

        received = []
        runtime.hub.subscribe(received.append)
        runtime.engine.emergency_shutdown()
        assert len(received) == 2

    def test_create_with_simulator(self) -> None:
        """Test the default catalog and simulator are used by default."""
        runtime = FacilityRuntime.create()
        assert runtime.simulator is not None
        assert len(runtime.engine.manager.all_rooms()) == 3

    @pytest.mark.asyncio
    async def test_start_and_stop(self, runtime: FacilityRuntime) -> None:
        """Test stop leaves no timers or tasks behind."""
        await runtime.async_start()
        assert runtime.running is True

        runtime.engine.set_occupancy(1, False)
        await asyncio.sleep(0)
        assert runtime.next_wakeup is not None

        await runtime.async_stop()

        assert runtime.running is False
        assert runtime.next_wakeup is None
        assert runtime._tasks == []
        assert runtime.engine.get_next_timeout() is None

    @pytest.mark.asyncio
    async def test_start_twice(self, runtime: FacilityRuntime) -> None:
        """Test a second start does not duplicate tasks."""
        await runtime.async_start()
        await runtime.async_start()
        assert len(runtime._tasks) == 1
        await runtime.async_stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self, runtime: FacilityRuntime) -> None:
        """Test stop is safe before start."""
        await runtime.async_stop()
        assert runtime.running is False


class TestDeferredWakeup:
    """Tests for deferred turn-off wake-ups."""

    @pytest.mark.asyncio
    async def test_due_turn_off_fires(self, runtime: FacilityRuntime) -> None:
        """Test a turn-off whose window already passed runs promptly."""
        await runtime.async_start()
        try:
            past = datetime.now(UTC) - timedelta(minutes=31)
            runtime.engine.set_occupancy(1, False, now=past)
            await asyncio.sleep(0.05)

            lab = runtime.engine.manager.get_room(1)
            assert all(a.state == ApplianceState.OFF for a in lab.appliances)
            assert runtime.next_wakeup is None
        finally:
            await runtime.async_stop()

    @pytest.mark.asyncio
    async def test_reoccupied_room_is_left_alone(self, runtime: FacilityRuntime) -> None:
        """Test the wake-up re-checks occupancy before acting."""
        await runtime.async_start()
        try:
            past = datetime.now(UTC) - timedelta(minutes=31)
            runtime.engine.set_occupancy(1, False, now=past)
            runtime.engine.set_occupancy(1, True)
            await asyncio.sleep(0.05)

            lab = runtime.engine.manager.get_room(1)
            assert lab.appliances[0].state == ApplianceState.ON
        finally:
            await runtime.async_stop()

    @pytest.mark.asyncio
    async def test_future_turn_off_waits(self, runtime: FacilityRuntime) -> None:
        """Test a fresh vacancy arms a wake-up but does nothing yet."""
        await runtime.async_start()
        try:
            runtime.engine.set_occupancy(1, False)
            await asyncio.sleep(0.05)

            loop = asyncio.get_running_loop()
            assert runtime.next_wakeup is not None
            assert runtime.next_wakeup - loop.time() > 60
            assert runtime.engine.manager.get_room(1).appliances[0].state == ApplianceState.ON
        finally:
            await runtime.async_stop()


class TestPeriodicTasks:
    """Tests for periodic shutdown checks."""

    @pytest.mark.asyncio
    async def test_checker_runs_periodically(self, runtime: FacilityRuntime) -> None:
        """Test the shutdown checker is called on its cadence."""
        calls = []
        runtime.checker.check = lambda: calls.append(1)

        await runtime.async_start()
        await asyncio.sleep(0.1)
        await runtime.async_stop()

        assert len(calls) >= 2

    @pytest.mark.asyncio
    async def test_errors_do_not_stop_task(self, runtime: FacilityRuntime) -> None:
        """Test an exception in a tick is logged and the task keeps going."""
        calls = []

        def broken() -> None:
            calls.append(1)
            raise RuntimeError("boom")

        runtime.checker.check = broken

        await runtime.async_start()
        await asyncio.sleep(0.1)
        await runtime.async_stop()

        assert len(calls) >= 2
