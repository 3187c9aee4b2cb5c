"""Exception taxonomy and error tracking for the security system."""

import functools
import threading
import traceback
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
from enum import Enum

from ..logging_config import get_logger

logger = get_logger("error_handler")


class SecurityError(Exception):
    """Base class for all security system errors."""


class InvalidArgumentError(SecurityError, ValueError):
    """A required sensor or status value was missing or invalid."""


class CollaboratorFailure(SecurityError):
    """A repository or image service call failed."""


class RepositoryError(CollaboratorFailure):
    """Reading or writing security state failed."""


class ImageServiceError(CollaboratorFailure):
    """The image classifier could not process an image."""


def require(value: Any, name: str) -> Any:
    """Return value, or raise InvalidArgumentError if it is None."""
    if value is None:
        raise InvalidArgumentError(f"{name} must not be None")
    return value


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ErrorRecord:
    """Record of an error occurrence."""
    component_name: str
    error: Exception
    severity: ErrorSeverity
    timestamp: datetime = field(default_factory=datetime.now)
    traceback_str: str = ""


class ErrorHandler:
    """Keeps a record of errors raised by each component.

    The handler only observes: it never retries, recovers or suppresses the
    error it is told about.
    """

    def __init__(self, max_records: int = 1000):
        self.max_records = max_records
        self.error_records: List[ErrorRecord] = []
        self.component_error_counts: Dict[str, int] = {}
        self._lock = threading.Lock()

    def register_component(self, component_name: str) -> None:
        """Register a component for error tracking."""
        with self._lock:
            self.component_error_counts.setdefault(component_name, 0)
        logger.debug(f"Component registered: {component_name}")

    def handle_error(self, component_name: str, error: Exception,
                     severity: ErrorSeverity = ErrorSeverity.MEDIUM) -> ErrorRecord:
        """Record an error from a component."""
        error_record = ErrorRecord(
            component_name=component_name,
            error=error,
            severity=severity,
            traceback_str=traceback.format_exc()
        )

        with self._lock:
            self.error_records.append(error_record)
            if len(self.error_records) > self.max_records:
                self.error_records = self.error_records[-self.max_records:]
            self.component_error_counts[component_name] = \
                self.component_error_counts.get(component_name, 0) + 1

        logger.error(f"Error in {component_name}: {error!r} (Severity: {severity.value})")
        return error_record

    def get_error_stats(self) -> Dict[str, Any]:
        """Get error statistics."""
        with self._lock:
            return {
                "total_errors": len(self.error_records),
                "component_error_counts": dict(self.component_error_counts)
            }

    def reset_error_counts(self, component_name: Optional[str] = None) -> None:
        """Reset error counts for a component or all components."""
        with self._lock:
            if component_name:
                if component_name in self.component_error_counts:
                    self.component_error_counts[component_name] = 0
                self.error_records = [
                    r for r in self.error_records if r.component_name != component_name
                ]
            else:
                for component in self.component_error_counts:
                    self.component_error_counts[component] = 0
                self.error_records = []

    def get_error_summary(self, hours: int = 24) -> Dict[str, Any]:
        """Get summary of errors in the last N hours."""
        cutoff_time = datetime.now() - timedelta(hours=hours)

        with self._lock:
            recent_errors = [e for e in self.error_records if e.timestamp >= cutoff_time]

        component_counts: Dict[str, int] = {}
        severity_counts = {severity.value: 0 for severity in ErrorSeverity}

        for error in recent_errors:
            component_counts[error.component_name] = component_counts.get(error.component_name, 0) + 1
            severity_counts[error.severity.value] += 1

        return {
            "total_errors": len(recent_errors),
            "component_counts": component_counts,
            "severity_counts": severity_counts,
            "time_period_hours": hours
        }


# Create global error handler instance
global_error_handler = ErrorHandler()


def track_errors(component_name: str, severity: ErrorSeverity = ErrorSeverity.HIGH,
                 error_handler: Optional[ErrorHandler] = None):
    """Decorator that records any exception with the error handler and re-raises it.

    Invalid arguments are the caller's mistake, not a component failure, so
    they are re-raised without being recorded.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except InvalidArgumentError:
                raise
            except Exception as e:
                handler = error_handler or global_error_handler
                handler.handle_error(component_name, e, severity)
                raise
        return wrapper
    return decorator
