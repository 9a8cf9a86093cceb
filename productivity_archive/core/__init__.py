"""Core Module.

This module provides the error taxonomy and database plumbing shared by the
archive services.
"""

from .exceptions import (
    ArchiveError,
    ConflictError,
    ForbiddenError,
    IdentifierCollisionError,
    InconsistentStateError,
    InvalidItemTypeError,
    InvalidRangeError,
    InvalidStateError,
    NotFoundError,
    StoreFailureError,
    ValidationError,
)

__all__ = [
    "ArchiveError",
    "InvalidItemTypeError",
    "NotFoundError",
    "ForbiddenError",
    "InvalidStateError",
    "ValidationError",
    "ConflictError",
    "InvalidRangeError",
    "StoreFailureError",
    "InconsistentStateError",
    "IdentifierCollisionError",
]
