"""SQLite-backed security repository."""

import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import List, Optional

from ..models.security import Sensor, SensorType, AlarmStatus, ArmingStatus
from .interfaces import SecurityRepositoryInterface
from .error_handler import RepositoryError, require
from ..utils import ensure_directory_exists
from ..logging_config import get_logger

logger = get_logger("storage_service")

ALARM_STATUS_KEY = "alarm_status"
ARMING_STATUS_KEY = "arming_status"
OLD_ARMING_STATUS_KEY = "old_arming_status"


class SQLiteSecurityRepository(SecurityRepositoryInterface):
    """Security repository that persists state in a SQLite database.

    Sensors live in a ``sensors`` table keyed by name; the alarm, arming and
    previous arming statuses live in a ``settings`` key/value table and are
    stored by enum member name. State survives reopening the same file.
    """

    def __init__(self, database_path: str = "data/security.db"):
        """
        Initialize the repository.

        Args:
            database_path: Path to the SQLite database file
        """
        self.database_path = database_path
        self._write_lock = threading.Lock()

        self._initialize_storage()

    @contextmanager
    def _connect(self):
        """Open a connection, commit on success, roll back on failure, always close."""
        try:
            conn = sqlite3.connect(self.database_path)
        except sqlite3.Error as e:
            raise RepositoryError(f"Failed to open database {self.database_path}: {e}") from e

        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Database operation failed: {e}")
            raise RepositoryError(f"Database operation failed: {e}") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _initialize_storage(self) -> None:
        """Create the database directory, tables and default statuses."""
        db_dir = os.path.dirname(self.database_path)
        if db_dir:
            ensure_directory_exists(db_dir)

        with self._write_lock, self._connect() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS sensors (
                    name TEXT PRIMARY KEY,
                    sensor_type TEXT NOT NULL,
                    active INTEGER NOT NULL DEFAULT 0
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)

            defaults = (
                (ALARM_STATUS_KEY, AlarmStatus.NO_ALARM.name),
                (ARMING_STATUS_KEY, ArmingStatus.DISARMED.name),
                (OLD_ARMING_STATUS_KEY, ArmingStatus.DISARMED.name),
            )
            cursor.executemany(
                "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?)", defaults
            )

        logger.info(f"Security database initialized: {self.database_path}")

    def add_sensor(self, sensor: Sensor) -> None:
        self._upsert_sensor(require(sensor, "sensor"))
        logger.debug(f"Added sensor {sensor.name}")

    def remove_sensor(self, sensor: Sensor) -> None:
        require(sensor, "sensor")
        with self._write_lock, self._connect() as conn:
            conn.execute("DELETE FROM sensors WHERE name = ?", (sensor.name,))

    def update_sensor(self, sensor: Sensor) -> None:
        self._upsert_sensor(require(sensor, "sensor"))

    def _upsert_sensor(self, sensor: Sensor) -> None:
        with self._write_lock, self._connect() as conn:
            conn.execute("""
                INSERT INTO sensors (name, sensor_type, active) VALUES (?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    sensor_type = excluded.sensor_type,
                    active = excluded.active
            """, (sensor.name, sensor.sensor_type.name, int(sensor.active)))

    def get_sensors(self) -> List[Sensor]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT name, sensor_type, active FROM sensors ORDER BY name"
            ).fetchall()

        sensors = []
        for name, sensor_type, active in rows:
            try:
                sensors.append(Sensor(name=name, sensor_type=SensorType[sensor_type], active=bool(active)))
            except KeyError as e:
                raise RepositoryError(f"Unknown sensor type {sensor_type!r} stored for {name}") from e
        return sensors

    def get_alarm_status(self) -> AlarmStatus:
        return self._read_status(ALARM_STATUS_KEY, AlarmStatus)

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        require(alarm_status, "alarm_status")
        with self._write_lock, self._connect() as conn:
            self._write_setting(conn, ALARM_STATUS_KEY, alarm_status.name)

    def get_arming_status(self) -> ArmingStatus:
        return self._read_status(ARMING_STATUS_KEY, ArmingStatus)

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        require(arming_status, "arming_status")
        with self._write_lock, self._connect() as conn:
            previous = self._read_setting(conn, ARMING_STATUS_KEY)
            if previous is not None:
                self._write_setting(conn, OLD_ARMING_STATUS_KEY, previous)
            self._write_setting(conn, ARMING_STATUS_KEY, arming_status.name)

    def get_old_arming_status(self) -> ArmingStatus:
        return self._read_status(OLD_ARMING_STATUS_KEY, ArmingStatus)

    def _read_status(self, key: str, enum_type):
        with self._connect() as conn:
            value = self._read_setting(conn, key)

        if value is None:
            raise RepositoryError(f"Setting {key} is missing from {self.database_path}")
        try:
            return enum_type[value]
        except KeyError as e:
            raise RepositoryError(f"Invalid value {value!r} stored for {key}") from e

    @staticmethod
    def _read_setting(conn: sqlite3.Connection, key: str) -> Optional[str]:
        row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None

    @staticmethod
    def _write_setting(conn: sqlite3.Connection, key: str, value: str) -> None:
        conn.execute(
            "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)", (key, value)
        )

    def __repr__(self) -> str:
        return f"SQLiteSecurityRepository(path='{self.database_path}')"
