"""
Sensors module for facility-automation.

Simulated occupancy input for demos and tests.
"""

from .simulator import SensorSimulator

__all__ = ["SensorSimulator"]
