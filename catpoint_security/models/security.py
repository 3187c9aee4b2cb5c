"""Security data models: sensors and the alarm/arming status enums."""

from dataclasses import dataclass, field
from enum import Enum


class SensorType(Enum):
    """Kinds of sensor a premises can have."""
    DOOR = "door"
    WINDOW = "window"
    MOTION = "motion"


class AlarmStatus(Enum):
    """Alarm status of the system, with display text and color."""
    NO_ALARM = ("Cool and Good", (120, 200, 30))
    PENDING_ALARM = ("I'm in Danger...", (200, 150, 20))
    ALARM = ("Awooga!", (250, 80, 50))

    def __init__(self, description: str, color: tuple):
        self.description = description
        self.color = color


class ArmingStatus(Enum):
    """Arming mode of the system, with display text and color."""
    DISARMED = ("Disarmed", (120, 200, 30))
    ARMED_HOME = ("Armed - At Home", (190, 180, 50))
    ARMED_AWAY = ("Armed - Away", (170, 30, 150))

    def __init__(self, description: str, color: tuple):
        self.description = description
        self.color = color

    @property
    def is_armed(self) -> bool:
        return self is not ArmingStatus.DISARMED


@dataclass(order=True)
class Sensor:
    """A named door, window or motion sensor.

    Sensors are identified by name: two sensors with the same name are equal
    no matter their type or state, and sort by name.
    """
    name: str
    sensor_type: SensorType = field(compare=False)
    active: bool = field(default=False, compare=False)

    def __hash__(self) -> int:
        return hash(self.name)

    def copy(self) -> "Sensor":
        """Return a detached copy of this sensor."""
        return Sensor(name=self.name, sensor_type=self.sensor_type, active=self.active)
