"""
Shutdown module for facility-automation.

Switches every appliance off once a day at the configured time.
"""

from .checker import DailyShutdownChecker

__all__ = ["DailyShutdownChecker"]
