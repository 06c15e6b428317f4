"""
DOMAIN EXCEPTIONS - Business rule violations

These exceptions are raised by domain and application logic and caught at the
edges: the HTTP routes map them to status codes, the websocket endpoint maps
them to auth_error frames or silent drops.
"""

from pairchat.domain.exceptions.auth import (
    AuthError,
    TokenMissing,
    TokenInvalidOrExpired,
    Unauthorized,
    InvalidCredential,
    AuthConfigurationError,
)
from pairchat.domain.exceptions.entity_not_found import EntityNotFoundError
from pairchat.domain.exceptions.validation_error import DomainValidationError
from pairchat.domain.exceptions.persistence_error import PersistenceError

__all__ = [
    "AuthError",
    "TokenMissing",
    "TokenInvalidOrExpired",
    "Unauthorized",
    "InvalidCredential",
    "AuthConfigurationError",
    "EntityNotFoundError",
    "DomainValidationError",
    "PersistenceError",
]
