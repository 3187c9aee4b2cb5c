"""Builds a configured security service."""

import logging
from typing import Optional

from .config_manager import ConfigManager
from .models.config import SystemConfig
from .services.interfaces import SecurityRepositoryInterface, ImageServiceInterface
from .services.error_handler import InvalidArgumentError
from .services.repository import InMemorySecurityRepository
from .services.storage_service import SQLiteSecurityRepository
from .services.image_service import FakeImageService, HaarCascadeImageService
from .services.security_service import SecurityService
from .logging_config import get_logger, setup_logging

logger = get_logger("bootstrap")


def create_repository(config: SystemConfig) -> SecurityRepositoryInterface:
    """Create the repository selected by ``repository_backend``."""
    if config.repository_backend == "memory":
        return InMemorySecurityRepository()
    if config.repository_backend == "sqlite":
        return SQLiteSecurityRepository(config.database_file)
    raise InvalidArgumentError(f"Unknown repository backend: {config.repository_backend!r}")


def create_image_service(config: SystemConfig) -> ImageServiceInterface:
    """Create the classifier selected by ``image_service``."""
    if config.image_service == "fake":
        return FakeImageService()
    if config.image_service == "haar":
        return HaarCascadeImageService(config.cascade_path or None)
    raise InvalidArgumentError(f"Unknown image service: {config.image_service!r}")


def create_security_service(config_manager: Optional[ConfigManager] = None,
                            image_service: Optional[ImageServiceInterface] = None,
                            repository: Optional[SecurityRepositoryInterface] = None,
                            configure_logging: bool = False) -> SecurityService:
    """
    Create a security service from configuration.

    Args:
        config_manager: Source of configuration; defaults to ``config.json``
        image_service: Classifier to use instead of the configured one
        repository: Repository to use instead of the configured one
        configure_logging: Set up log files from log_level and log_dir first, and
            follow later log_level changes
    """
    config_manager = config_manager or ConfigManager()
    config = config_manager.get_config()

    if not config_manager.validate_config():
        raise InvalidArgumentError(f"Invalid configuration in {config_manager.config_path}")

    if configure_logging:
        manager = setup_logging(config.log_level, config.log_dir)
        config_manager.register_change_callback(
            lambda new_config: manager.set_log_level(
                getattr(logging, str(new_config.log_level).upper(), logging.INFO)
            )
        )

    if repository is None:
        repository = create_repository(config)
    if image_service is None:
        image_service = create_image_service(config)

    service = SecurityService(repository, image_service, config.confidence_threshold)
    logger.info(f"Security service created (repository={type(repository).__name__}, "
                f"image_service={type(image_service).__name__})")
    return service
