"""
Catpoint Security

Alarm decision engine for a home security system: combines door, window and
motion sensors with camera images checked for cats to decide whether the
premises is safe, pending an alarm, or in alarm.
"""

__version__ = "1.0.0"
__author__ = "Catpoint Security"

from .config_manager import ConfigManager
from .models import (
    Sensor,
    SensorType,
    AlarmStatus,
    ArmingStatus,
    BoundingBox,
    SystemConfig
)
from .services import (
    SecurityRepositoryInterface,
    ImageServiceInterface,
    StatusListener,
    SecurityError,
    InvalidArgumentError,
    CollaboratorFailure,
    RepositoryError,
    ImageServiceError,
    InMemorySecurityRepository,
    SQLiteSecurityRepository,
    SecurityService
)

__all__ = [
    # Core management
    'ConfigManager',
    'SecurityService',

    # Data models
    'Sensor',
    'SensorType',
    'AlarmStatus',
    'ArmingStatus',
    'BoundingBox',
    'SystemConfig',

    # Service interfaces
    'SecurityRepositoryInterface',
    'ImageServiceInterface',
    'StatusListener',

    # Repositories
    'InMemorySecurityRepository',
    'SQLiteSecurityRepository',

    # Errors
    'SecurityError',
    'InvalidArgumentError',
    'CollaboratorFailure',
    'RepositoryError',
    'ImageServiceError'
]
