"""Configuration data models."""

from dataclasses import dataclass


@dataclass
class SystemConfig:
    """System configuration settings."""
    # Image classification
    confidence_threshold: float = 50.0  # percent, 0-100
    image_service: str = "fake"  # fake, haar
    cascade_path: str = ""  # empty uses the cascade bundled with OpenCV

    # Persistence
    repository_backend: str = "memory"  # memory, sqlite
    database_file: str = "data/security.db"

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"
