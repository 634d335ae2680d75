"""
App package - Application configuration and core utilities.
Contains settings, exceptions, and foundational application code.
"""

from app.config import settings
from app.exceptions import (
    ServiceValidationError,
    NotFoundError,
    UnauthorizedError,
    StoreError,
    PermissionDeniedError,
    StoreUnavailableError,
    WriteFailedError,
)

__all__ = [
    "settings",
    "ServiceValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "StoreError",
    "PermissionDeniedError",
    "StoreUnavailableError",
    "WriteFailedError",
]
