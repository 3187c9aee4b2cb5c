"""Configuration components for the Catpoint security system."""

from .defaults import (
    DEFAULT_CONFIG,
    DEFAULT_PATHS,
    CLASSIFIER_SETTINGS,
    REPOSITORY_BACKENDS,
    IMAGE_SERVICES,
    LOG_LEVELS
)

__all__ = [
    'DEFAULT_CONFIG',
    'DEFAULT_PATHS',
    'CLASSIFIER_SETTINGS',
    'REPOSITORY_BACKENDS',
    'IMAGE_SERVICES',
    'LOG_LEVELS'
]
