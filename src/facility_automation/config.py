"""
Process configuration for the facility-automation service.

Runtime automation settings (inactivity window, shutdown time) live in
core.settings and change through the API. This module only covers how the
process itself is started.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from facility_automation.const import (
    DEFAULT_CHECK_INTERVAL,
    DEFAULT_PORT,
    DEFAULT_SENSOR_INTERVAL,
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class FacilityConfig:
    """
    Service startup options.

    Attributes:
        host: Interface to bind
        port: HTTP port
        check_interval: Seconds between daily shutdown checks
        sensor_interval: Seconds between simulated sensor ticks
        simulate_sensors: Run the sensor simulator
        log_level: Root log level name
    """

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    check_interval: float = DEFAULT_CHECK_INTERVAL
    sensor_interval: float = DEFAULT_SENSOR_INTERVAL
    simulate_sensors: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "FacilityConfig":
        """
        Read configuration from environment variables.

        Recognised: HOST, PORT, FACILITY_CHECK_INTERVAL,
        FACILITY_SENSOR_INTERVAL, FACILITY_SIMULATE_SENSORS,
        FACILITY_LOG_LEVEL.

        Raises:
            ValueError: If a numeric variable is not a number
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        return cls(
            host=env.get("HOST", defaults.host),
            port=int(env.get("PORT", defaults.port)),
            check_interval=float(env.get("FACILITY_CHECK_INTERVAL", defaults.check_interval)),
            sensor_interval=float(env.get("FACILITY_SENSOR_INTERVAL", defaults.sensor_interval)),
            simulate_sensors=(
                env.get("FACILITY_SIMULATE_SENSORS", str(defaults.simulate_sensors)).lower()
                in _TRUE_VALUES
            ),
            log_level=env.get("FACILITY_LOG_LEVEL", defaults.log_level).upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the service process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
