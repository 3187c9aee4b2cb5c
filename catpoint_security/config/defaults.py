"""Default configuration values and constants."""

from typing import Dict, Any

# Default system configuration
DEFAULT_CONFIG: Dict[str, Any] = {
    # Image classification
    "confidence_threshold": 50.0,
    "image_service": "fake",
    "cascade_path": "",

    # Persistence
    "repository_backend": "memory",
    "database_file": "data/security.db",

    # Logging
    "log_level": "INFO",
    "log_dir": "logs"
}

# Accepted values for the choice settings
REPOSITORY_BACKENDS = ("memory", "sqlite")
IMAGE_SERVICES = ("fake", "haar")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# File paths and directories
DEFAULT_PATHS = {
    "config_file": "config.json"
}

# Haar cascade classifier settings
CLASSIFIER_SETTINGS = {
    "cascade_file": "haarcascade_frontalcatface.xml",
    "scale_factor": 1.1,
    "min_neighbors": 3,
    "min_size": (30, 30),
    "max_size": (300, 300),
    "blur_kernel_size": 3
}
