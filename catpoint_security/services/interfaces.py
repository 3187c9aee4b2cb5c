"""Service interfaces and abstract base classes."""

from abc import ABC, abstractmethod
from typing import List, Any

from ..models.security import Sensor, AlarmStatus, ArmingStatus


class SecurityRepositoryInterface(ABC):
    """Interface for the store that owns sensors, alarm status and arming status.

    Implementations upsert sensors by name and reject ``None`` arguments with
    InvalidArgumentError. Failures of the backing store surface as
    RepositoryError.
    """

    @abstractmethod
    def add_sensor(self, sensor: Sensor) -> None:
        """Add a sensor."""
        pass

    @abstractmethod
    def remove_sensor(self, sensor: Sensor) -> None:
        """Remove a sensor; removing an unknown sensor does nothing."""
        pass

    @abstractmethod
    def update_sensor(self, sensor: Sensor) -> None:
        """Replace the sensor with the same name, or insert it."""
        pass

    @abstractmethod
    def get_sensors(self) -> List[Sensor]:
        """Get all sensors ordered by name."""
        pass

    @abstractmethod
    def get_alarm_status(self) -> AlarmStatus:
        """Get the current alarm status."""
        pass

    @abstractmethod
    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        """Store a new alarm status."""
        pass

    @abstractmethod
    def get_arming_status(self) -> ArmingStatus:
        """Get the current arming status."""
        pass

    @abstractmethod
    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        """Store a new arming status, remembering the previous one."""
        pass

    @abstractmethod
    def get_old_arming_status(self) -> ArmingStatus:
        """Get the arming status in effect before the most recent change."""
        pass


class ImageServiceInterface(ABC):
    """Interface for the image classifier."""

    @abstractmethod
    def image_contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        """Return True if a cat is found with at least the given confidence (percent)."""
        pass


class StatusListener(ABC):
    """Receives notifications when the security state changes."""

    @abstractmethod
    def notify(self, alarm_status: AlarmStatus) -> None:
        """Called after the alarm status is written."""
        pass

    @abstractmethod
    def cat_detected(self, detected: bool) -> None:
        """Called after an image has been classified."""
        pass

    @abstractmethod
    def sensor_status_changed(self) -> None:
        """Called after sensors are added, removed or change state."""
        pass
