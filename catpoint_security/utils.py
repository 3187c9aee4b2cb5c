"""Utility functions for the Catpoint security system."""

import os
from typing import Iterable

from .models.security import Sensor


def ensure_directory_exists(path: str) -> None:
    """Ensure a directory exists, create if it doesn't."""
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)


def any_sensor_active(sensors: Iterable[Sensor]) -> bool:
    """Check whether at least one sensor is active."""
    return any(sensor.active for sensor in sensors)


def format_sensor(sensor: Sensor) -> str:
    """Format a sensor for log messages."""
    state = "active" if sensor.active else "inactive"
    return f"{sensor.name} ({sensor.sensor_type.name.lower()}, {state})"
