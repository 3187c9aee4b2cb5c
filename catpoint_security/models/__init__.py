"""Data models for the Catpoint security system."""

from .security import Sensor, SensorType, AlarmStatus, ArmingStatus
from .detection import BoundingBox
from .config import SystemConfig

__all__ = ['Sensor', 'SensorType', 'AlarmStatus', 'ArmingStatus', 'BoundingBox', 'SystemConfig']
