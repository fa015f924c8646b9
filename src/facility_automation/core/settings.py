"""
Process-wide automation settings.

Settings are read by the occupancy engine when a deferred turn-off is
scheduled and by the daily shutdown checker on every check.
"""

from dataclasses import dataclass, fields
from datetime import time
from enum import Enum
from typing import Any, Dict, Optional


# Longest accepted inactivity window (one year)
MAX_INACTIVITY_MINUTES = 365 * 24 * 60


class Sensitivity(Enum):
    """Sensor sensitivity (reserved for sensor tuning, not used by automation)."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class WeekendMode(Enum):
    """Weekend behaviour (reserved, not used by automation)."""

    NORMAL = "normal"
    ECO = "eco"
    OFF = "off"


def parse_shutdown_time(value: str) -> time:
    """
    Parse a wall-clock "HH:MM" (24h) string.

    Args:
        value: Time string, e.g. "22:00"

    Returns:
        Parsed time value

    Raises:
        ValueError: If the string is not a valid HH:MM time
    """
    if not isinstance(value, str):
        raise ValueError(f"Shutdown time must be a string, got {type(value).__name__}")

    parts = value.strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() and len(p) == 2 for p in parts):
        raise ValueError(f"Shutdown time must be HH:MM, got '{value}'")

    return time(hour=int(parts[0]), minute=int(parts[1]))


@dataclass
class Settings:
    """
    Tunable automation parameters.

    Attributes:
        inactivity_minutes: Minutes a room must stay vacant before its
            appliances are switched off
        auto_shutdown_time: Daily "HH:MM" at which everything is switched off
        sensitivity: Sensor sensitivity
        weekend_mode: Weekend behaviour
    """

    inactivity_minutes: int = 30
    auto_shutdown_time: str = "22:00"
    sensitivity: Sensitivity = Sensitivity.MEDIUM
    weekend_mode: WeekendMode = WeekendMode.NORMAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inactivityTimer": self.inactivity_minutes,
            "autoShutdownTime": self.auto_shutdown_time,
            "sensitivity": self.sensitivity.value,
            "weekendMode": self.weekend_mode.value,
        }


@dataclass(frozen=True)
class SettingsUpdate:
    """
    A partial settings change.

    Fields left as None are not touched. Falsy wire values (0, "") are
    treated the same as missing ones, so a settings form that posts an
    empty field never clears a setting.
    """

    inactivity_minutes: Optional[int] = None
    auto_shutdown_time: Optional[str] = None
    sensitivity: Optional[Sensitivity] = None
    weekend_mode: Optional[WeekendMode] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SettingsUpdate":
        """
        Build an update from a wire payload.

        Accepts the dashboard keys (inactivityTimer, autoShutdownTime,
        sensitivity, weekendMode).

        Raises:
            ValueError: If a provided value is malformed
        """
        inactivity = data.get("inactivityTimer") or None
        if inactivity is not None:
            if isinstance(inactivity, bool) or not isinstance(inactivity, int):
                raise ValueError(f"inactivityTimer must be an integer, got {inactivity!r}")
            if inactivity < 0:
                raise ValueError(f"inactivityTimer must be positive, got {inactivity}")
            if inactivity > MAX_INACTIVITY_MINUTES:
                raise ValueError(
                    f"inactivityTimer must be at most {MAX_INACTIVITY_MINUTES}, got {inactivity}"
                )

        shutdown_time = data.get("autoShutdownTime") or None
        if shutdown_time is not None:
            parse_shutdown_time(shutdown_time)

        sensitivity = data.get("sensitivity") or None
        weekend_mode = data.get("weekendMode") or None

        return cls(
            inactivity_minutes=inactivity,
            auto_shutdown_time=shutdown_time,
            sensitivity=Sensitivity(sensitivity) if sensitivity else None,
            weekend_mode=WeekendMode(weekend_mode) if weekend_mode else None,
        )

    def apply_to(self, settings: Settings) -> list[str]:
        """
        Apply provided fields to settings in place.

        Returns:
            Names of the fields that were applied
        """
        applied = []
        for f in fields(self):
            value = getattr(self, f.name)
            if value:
                setattr(settings, f.name, value)
                applied.append(f.name)
        return applied
