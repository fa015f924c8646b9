"""
DailyShutdownChecker - switch everything off at a fixed wall-clock time.

The checker does not schedule itself. The host calls check() on a fixed
cadence (60 seconds by default).
"""

import logging
from datetime import date, datetime
from typing import Optional, Tuple

from facility_automation.core.settings import parse_shutdown_time
from facility_automation.modules.occupancy.engine import OccupancyEngine

logger = logging.getLogger(__name__)


class DailyShutdownChecker:
    """
    Compares the wall clock against settings.auto_shutdown_time.

    Fires at most once per matching minute. A minute that is never checked
    (process suspended, cadence coarser than a minute) is simply missed;
    there is no catch-up.
    """

    def __init__(self, engine: OccupancyEngine) -> None:
        self._engine = engine
        self._last_fired: Optional[Tuple[date, int, int]] = None

    def check(self, now: Optional[datetime] = None) -> bool:
        """
        Run one check.

        Args:
            now: Current local wall-clock time (defaults to local now)

        Returns:
            True if appliances were switched off by this call
        """
        if now is None:
            now = datetime.now().astimezone()

        shutdown_time = self._engine.settings.auto_shutdown_time
        try:
            target = parse_shutdown_time(shutdown_time)
        except ValueError as e:
            logger.warning(f"Ignoring invalid auto-shutdown time: {e}")
            return False

        if (now.hour, now.minute) != (target.hour, target.minute):
            return False

        minute = (now.date(), now.hour, now.minute)
        if self._last_fired == minute:
            logger.debug(f"Auto-shutdown already ran for {shutdown_time} today")
            return False

        self._last_fired = minute
        logger.info("Auto-shutdown time reached")
        self._engine.force_all_off("auto_shutdown", now=now)
        return True
