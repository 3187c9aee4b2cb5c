"""Alarm decision engine.

Combines sensor events, image classification results and the arming mode to
decide the alarm status. All state lives in the repository; every operation
re-reads what it needs, decides, and only then writes. If one of an
operation's writes fails, the writes it already made are undone before the
error propagates, so the repository never holds a partial update.
"""

import threading
from functools import partial
from typing import Any, Callable, List, Optional, Sequence, Tuple

from ..models.security import Sensor, AlarmStatus, ArmingStatus
from ..config.defaults import DEFAULT_CONFIG
from .interfaces import SecurityRepositoryInterface, ImageServiceInterface, StatusListener
from . import error_handler
from .error_handler import InvalidArgumentError, require, track_errors
from ..utils import any_sensor_active, format_sensor
from ..logging_config import get_logger

logger = get_logger("security_service")

COMPONENT_NAME = "security_service"

# A write and the call that reverts it; None when nothing follows the write
Write = Tuple[Callable[[], None], Optional[Callable[[], None]]]
# A listener method name and its arguments
Notification = Tuple[str, tuple]


class SecurityService:
    """Decides the alarm status from sensors, camera images and the arming mode.

    One reentrant lock serializes every operation, so a rule's
    read-decide-write sequence never interleaves with another rule's.
    Listeners are notified after the lock is released. Collaborator failures
    propagate unchanged; the engine does not retry.
    """

    def __init__(self,
                 repository: SecurityRepositoryInterface,
                 image_service: ImageServiceInterface,
                 confidence_threshold: float = DEFAULT_CONFIG["confidence_threshold"]):
        self.repository = require(repository, "repository")
        self.image_service = require(image_service, "image_service")
        self.confidence_threshold = confidence_threshold

        self._lock = threading.RLock()
        self._status_listeners: List[StatusListener] = []

        error_handler.global_error_handler.register_component(COMPONENT_NAME)
        logger.info(f"Security service initialized (confidence threshold {confidence_threshold})")

    # Listeners

    def add_status_listener(self, listener: StatusListener) -> None:
        """Register a listener for status changes."""
        require(listener, "listener")
        with self._lock:
            if listener not in self._status_listeners:
                self._status_listeners.append(listener)

    def remove_status_listener(self, listener: StatusListener) -> None:
        """Unregister a status listener."""
        with self._lock:
            if listener in self._status_listeners:
                self._status_listeners.remove(listener)

    def _notify_listeners(self, notifications: Sequence[Notification]) -> None:
        """Deliver notifications; must be called without holding the lock."""
        with self._lock:
            listeners = list(self._status_listeners)

        for method_name, args in notifications:
            for listener in listeners:
                try:
                    getattr(listener, method_name)(*args)
                except Exception as e:
                    logger.error(f"Status listener {listener!r} failed in {method_name}: {e}", exc_info=True)

    # Writes

    @staticmethod
    def _apply_writes(writes: Sequence[Write]) -> None:
        """Run writes in order; if one fails, undo the earlier ones newest first and re-raise."""
        undos = []
        try:
            for write, undo in writes:
                write()
                if undo is not None:
                    undos.append(undo)
        except Exception:
            for undo in reversed(undos):
                try:
                    undo()
                except Exception as e:
                    logger.error(f"Failed to roll back repository write: {e}", exc_info=True)
            raise

    def _log_alarm_change(self, previous: AlarmStatus, alarm_status: AlarmStatus) -> None:
        logger.info(f"Alarm status set to {alarm_status.name}",
                    extra={"context": {"previous": previous.name, "current": alarm_status.name}})

    # Commands

    @track_errors(COMPONENT_NAME)
    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        """Write the alarm status and notify listeners."""
        require(alarm_status, "alarm_status")
        with self._lock:
            previous = self.repository.get_alarm_status()
            self.repository.set_alarm_status(alarm_status)
            self._log_alarm_change(previous, alarm_status)

        self._notify_listeners([("notify", (alarm_status,))])

    @track_errors(COMPONENT_NAME)
    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        """
        Change the arming mode.

        Disarming clears any pending or active alarm. Arming (home or away)
        resets every sensor to inactive so a stale activation cannot trip the
        pending-alarm rule straight away. The arming status is written last.
        """
        require(arming_status, "arming_status")

        with self._lock:
            if not arming_status.is_armed:
                previous_alarm = self.repository.get_alarm_status()
                self._apply_writes([
                    (partial(self.repository.set_alarm_status, AlarmStatus.NO_ALARM),
                     partial(self.repository.set_alarm_status, previous_alarm)),
                    (partial(self.repository.set_arming_status, arming_status), None),
                ])
                self._log_alarm_change(previous_alarm, AlarmStatus.NO_ALARM)
                logger.info("System disarmed")
                notifications = [("notify", (AlarmStatus.NO_ALARM,))]
            else:
                sensors = self.repository.get_sensors()
                originals = [sensor.copy() for sensor in sensors]

                writes = []
                for sensor, original in zip(sensors, originals):
                    sensor.active = False
                    writes.append((partial(self.repository.update_sensor, sensor),
                                   partial(self.repository.update_sensor, original)))
                # TODO: alarm straight away when arming home while the last classified
                # image showed a cat, using repository.get_old_arming_status() to spot
                # the disarmed-to-armed transition.
                writes.append((partial(self.repository.set_arming_status, arming_status), None))

                try:
                    self._apply_writes(writes)
                except Exception:
                    for sensor, original in zip(sensors, originals):
                        sensor.active = original.active
                    raise

                logger.info(f"System armed ({arming_status.name}), {len(sensors)} sensor(s) reset")
                notifications = [("sensor_status_changed", ())] if sensors else []

        self._notify_listeners(notifications)

    @track_errors(COMPONENT_NAME)
    def change_sensor_activation_status(self, sensor: Sensor, active: bool) -> None:
        """
        Record a sensor becoming active or inactive and apply the alarm rules.

        Args:
            sensor: The sensor that changed; identified by name
            active: Its new state
        """
        require(sensor, "sensor")
        if not isinstance(active, bool):
            raise InvalidArgumentError(f"active must be a bool, got {type(active).__name__}")

        with self._lock:
            sensors = {s.name: s for s in self.repository.get_sensors()}
            previous = sensors.get(sensor.name)
            was_active = previous.active if previous is not None else False
            alarm_status = self.repository.get_alarm_status()
            arming_status = self.repository.get_arming_status()

            updated = Sensor(name=sensor.name, sensor_type=sensor.sensor_type, active=active)
            sensors[updated.name] = updated

            next_status = self._next_status_for_sensor(
                alarm_status, arming_status, was_active, active, sensors.values()
            )

            if previous is None:
                undo_sensor = partial(self.repository.remove_sensor, updated)
            else:
                undo_sensor = partial(self.repository.update_sensor, previous)
            writes = [(partial(self.repository.update_sensor, updated), undo_sensor)]
            if next_status is not None:
                writes.append((partial(self.repository.set_alarm_status, next_status), None))

            self._apply_writes(writes)
            sensor.active = active
            logger.debug(f"Sensor {format_sensor(updated)} (was {'active' if was_active else 'inactive'})")

            notifications = [("sensor_status_changed", ())]
            if next_status is not None:
                self._log_alarm_change(alarm_status, next_status)
                notifications.insert(0, ("notify", (next_status,)))

        self._notify_listeners(notifications)

    @staticmethod
    def _next_status_for_sensor(alarm_status: AlarmStatus,
                                arming_status: ArmingStatus,
                                was_active: bool,
                                active: bool,
                                sensors_after) -> Optional[AlarmStatus]:
        """Return the alarm status a sensor change leads to, or None for no change."""
        if alarm_status is AlarmStatus.ALARM:
            return None

        if active:
            if not arming_status.is_armed:
                logger.debug("Sensor activation ignored while disarmed")
                return None
            if alarm_status is AlarmStatus.NO_ALARM:
                return AlarmStatus.PENDING_ALARM
            if alarm_status is AlarmStatus.PENDING_ALARM:
                return AlarmStatus.ALARM
            return None

        if not was_active:
            return None

        if alarm_status is AlarmStatus.PENDING_ALARM and not any_sensor_active(sensors_after):
            return AlarmStatus.NO_ALARM
        return None

    @track_errors(COMPONENT_NAME)
    def process_image(self, image: Any) -> bool:
        """
        Classify a camera image and apply the camera rules.

        A cat while armed home raises the alarm. No cat and no active sensor
        clears it. Anything else leaves the status alone.

        Returns:
            Whether the classifier found a cat
        """
        with self._lock:
            detected = bool(self.image_service.image_contains_cat(image, self.confidence_threshold))

            next_status = None
            if detected:
                if self.repository.get_arming_status() is ArmingStatus.ARMED_HOME:
                    next_status = AlarmStatus.ALARM
                else:
                    logger.debug("Cat detected but system is not armed home")
            elif not any_sensor_active(self.repository.get_sensors()):
                next_status = AlarmStatus.NO_ALARM
            else:
                logger.debug("No cat detected but a sensor is still active")

            notifications = []
            if next_status is not None:
                previous = self.repository.get_alarm_status()
                self.repository.set_alarm_status(next_status)
                self._log_alarm_change(previous, next_status)
                notifications.append(("notify", (next_status,)))
            notifications.append(("cat_detected", (detected,)))

        self._notify_listeners(notifications)
        return detected

    @track_errors(COMPONENT_NAME)
    def add_sensor(self, sensor: Sensor) -> None:
        """Add a sensor to the system."""
        require(sensor, "sensor")
        with self._lock:
            self.repository.add_sensor(sensor)
            logger.info(f"Sensor added: {format_sensor(sensor)}")

        self._notify_listeners([("sensor_status_changed", ())])

    @track_errors(COMPONENT_NAME)
    def remove_sensor(self, sensor: Sensor) -> None:
        """Remove a sensor from the system; unknown sensors are ignored."""
        require(sensor, "sensor")
        with self._lock:
            self.repository.remove_sensor(sensor)
            logger.info(f"Sensor removed: {sensor.name}")

        self._notify_listeners([("sensor_status_changed", ())])

    # Queries

    @track_errors(COMPONENT_NAME)
    def get_alarm_status(self) -> AlarmStatus:
        with self._lock:
            return self.repository.get_alarm_status()

    @track_errors(COMPONENT_NAME)
    def get_arming_status(self) -> ArmingStatus:
        with self._lock:
            return self.repository.get_arming_status()

    @track_errors(COMPONENT_NAME)
    def get_sensors(self) -> List[Sensor]:
        with self._lock:
            return sorted(self.repository.get_sensors())
