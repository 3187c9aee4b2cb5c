"""Services for the Catpoint security system."""

from .interfaces import (
    SecurityRepositoryInterface,
    ImageServiceInterface,
    StatusListener
)
from .error_handler import (
    SecurityError,
    InvalidArgumentError,
    CollaboratorFailure,
    RepositoryError,
    ImageServiceError
)
from .repository import InMemorySecurityRepository
from .storage_service import SQLiteSecurityRepository
from .security_service import SecurityService

__all__ = [
    'SecurityRepositoryInterface',
    'ImageServiceInterface',
    'StatusListener',
    'SecurityError',
    'InvalidArgumentError',
    'CollaboratorFailure',
    'RepositoryError',
    'ImageServiceError',
    'InMemorySecurityRepository',
    'SQLiteSecurityRepository',
    'SecurityService'
]
