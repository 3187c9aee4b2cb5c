"""In-memory security repository."""

import threading
from typing import Dict, Iterable, List, Optional

from ..models.security import Sensor, AlarmStatus, ArmingStatus
from .interfaces import SecurityRepositoryInterface
from .error_handler import require
from ..logging_config import get_logger

logger = get_logger("repository")


class InMemorySecurityRepository(SecurityRepositoryInterface):
    """Security repository that keeps all state in process memory.

    Sensors are kept in a dict keyed by name and copied on the way in and out,
    so callers never share a Sensor instance with the repository.
    """

    def __init__(self,
                 sensors: Optional[Iterable[Sensor]] = None,
                 alarm_status: AlarmStatus = AlarmStatus.NO_ALARM,
                 arming_status: ArmingStatus = ArmingStatus.DISARMED):
        self._lock = threading.Lock()
        self._sensors: Dict[str, Sensor] = {}
        self._alarm_status = require(alarm_status, "alarm_status")
        self._arming_status = require(arming_status, "arming_status")
        self._old_arming_status = self._arming_status

        for sensor in sensors or ():
            self._sensors[require(sensor, "sensor").name] = sensor.copy()

        logger.debug(f"In-memory repository created with {len(self._sensors)} sensors")

    def add_sensor(self, sensor: Sensor) -> None:
        require(sensor, "sensor")
        with self._lock:
            self._sensors[sensor.name] = sensor.copy()

    def remove_sensor(self, sensor: Sensor) -> None:
        require(sensor, "sensor")
        with self._lock:
            self._sensors.pop(sensor.name, None)

    def update_sensor(self, sensor: Sensor) -> None:
        require(sensor, "sensor")
        with self._lock:
            self._sensors[sensor.name] = sensor.copy()

    def get_sensors(self) -> List[Sensor]:
        with self._lock:
            return [sensor.copy() for sensor in sorted(self._sensors.values())]

    def get_alarm_status(self) -> AlarmStatus:
        with self._lock:
            return self._alarm_status

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        require(alarm_status, "alarm_status")
        with self._lock:
            self._alarm_status = alarm_status

    def get_arming_status(self) -> ArmingStatus:
        with self._lock:
            return self._arming_status

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        require(arming_status, "arming_status")
        with self._lock:
            self._old_arming_status = self._arming_status
            self._arming_status = arming_status

    def get_old_arming_status(self) -> ArmingStatus:
        with self._lock:
            return self._old_arming_status
