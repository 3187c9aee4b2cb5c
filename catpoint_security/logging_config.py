"""Centralized logging configuration for the Catpoint security system."""

import logging
import logging.handlers
import os
import sys
from typing import Optional, Dict
from pathlib import Path

LOGGER_NAMESPACE = "catpoint_security"


class StructuredFormatter(logging.Formatter):
    """Custom formatter that adds structured information to log records."""

    def __init__(self, include_context: bool = True):
        self.include_context = include_context
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with structured information."""
        base_format = "%(asctime)s | %(levelname)-8s | %(name)-35s | %(message)s"

        if self.include_context and hasattr(record, 'context'):
            context_str = " | ".join([f"{k}={v}" for k, v in record.context.items()])
            base_format += f" | Context: {context_str}"

        if record.levelno >= logging.ERROR and record.exc_info:
            base_format += " | %(pathname)s:%(lineno)d"

        formatter = logging.Formatter(base_format)
        return formatter.format(record)


class ContextFilter(logging.Filter):
    """Filter that adds component and process information to log records."""

    def __init__(self, component_name: Optional[str] = None):
        super().__init__()
        self.component_name = component_name
        self.process_id = os.getpid()

    def filter(self, record: logging.LogRecord) -> bool:
        record.process_id = self.process_id
        if self.component_name:
            record.component = self.component_name
        return True


class LoggingManager:
    """Centralized logging management for the security system."""

    def __init__(self, log_dir: str = "logs", log_level: int = logging.INFO):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        # Log files
        self.main_log_file = self.log_dir / "catpoint_security.log"
        self.error_log_file = self.log_dir / "errors.log"

        self.log_level = log_level
        self.max_log_size = 10 * 1024 * 1024  # 10MB
        self.backup_count = 5

        self.component_loggers: Dict[str, logging.Logger] = {}
        self._handlers: list = []

        self._setup_package_logger()

    def _setup_package_logger(self) -> None:
        """Attach console and rotating file handlers to the package logger."""
        package_logger = logging.getLogger(LOGGER_NAMESPACE)
        package_logger.setLevel(self.log_level)

        for handler in self._handlers:
            package_logger.removeHandler(handler)
        self._handlers = []

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(StructuredFormatter(include_context=False))

        main_file_handler = logging.handlers.RotatingFileHandler(
            self.main_log_file,
            maxBytes=self.max_log_size,
            backupCount=self.backup_count
        )
        main_file_handler.setLevel(logging.DEBUG)
        main_file_handler.setFormatter(StructuredFormatter(include_context=True))

        # Errors and critical only
        error_file_handler = logging.handlers.RotatingFileHandler(
            self.error_log_file,
            maxBytes=self.max_log_size,
            backupCount=self.backup_count
        )
        error_file_handler.setLevel(logging.ERROR)
        error_file_handler.setFormatter(StructuredFormatter(include_context=True))

        for handler in (console_handler, main_file_handler, error_file_handler):
            package_logger.addHandler(handler)
            self._handlers.append(handler)

        package_logger.info("Logging system initialized")

    def get_component_logger(self, component_name: str) -> logging.Logger:
        """Get or create a logger for a specific component."""
        if component_name in self.component_loggers:
            return self.component_loggers[component_name]

        logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{component_name}")
        logger.addFilter(ContextFilter(component_name))

        self.component_loggers[component_name] = logger
        return logger

    def set_log_level(self, level: int) -> None:
        """Set the level of the package logger and its console handler."""
        self.log_level = level
        logging.getLogger(LOGGER_NAMESPACE).setLevel(level)
        for handler in self._handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)

    def close(self) -> None:
        """Detach and close the handlers owned by this manager."""
        package_logger = logging.getLogger(LOGGER_NAMESPACE)
        for handler in self._handlers:
            package_logger.removeHandler(handler)
            handler.close()
        self._handlers = []


# Created by setup_logging(); until then component loggers propagate to
# whatever the host application configured.
logging_manager: Optional[LoggingManager] = None


def get_logger(component_name: str) -> logging.Logger:
    """Convenience function to get a component logger."""
    if logging_manager is not None:
        return logging_manager.get_component_logger(component_name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{component_name}")


def setup_logging(log_level: str = "INFO", log_dir: str = "logs") -> LoggingManager:
    """Setup centralized logging system."""
    global logging_manager

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if logging_manager is not None:
        logging_manager.close()

    logging_manager = LoggingManager(log_dir, numeric_level)
    return logging_manager
