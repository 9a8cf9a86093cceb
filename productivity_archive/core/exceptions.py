"""Core Exceptions Module.

This module defines the typed failures raised by the archive, restore and
analytics operations. Every failure carries a machine-readable ``code`` and a
human-readable message; the API layer maps them onto HTTP responses.
"""

from typing import Optional


class ArchiveError(Exception):
    """Base exception for all productivity archive errors."""

    default_code = "ARCHIVE_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        """Initialize exception.

        Args:
            message: Error message
            code: Optional error code, defaults to the class code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class InvalidItemTypeError(ArchiveError):
    """Raised when an item type is not one of the archivable types."""

    default_code = "INVALID_ITEM_TYPE"


class NotFoundError(ArchiveError):
    """Raised when a live item or archive record does not exist."""

    default_code = "NOT_FOUND"


class ForbiddenError(ArchiveError):
    """Raised when the acting user may not archive or restore an item."""

    default_code = "FORBIDDEN"


class InvalidStateError(ArchiveError):
    """Raised when archiving a task or project that is not completed."""

    default_code = "INVALID_STATE"


class ValidationError(ArchiveError):
    """Raised when input or archived data fails validation."""

    default_code = "VALIDATION_ERROR"


class ConflictError(ArchiveError):
    """Raised when an operation would clash with an existing item."""

    default_code = "CONFLICT"


class InvalidRangeError(ArchiveError):
    """Raised when a date range ends before it starts."""

    default_code = "INVALID_RANGE"


class StoreFailureError(ArchiveError):
    """Raised when the underlying persistence layer fails."""

    default_code = "STORE_FAILURE"


class InconsistentStateError(StoreFailureError):
    """Raised when a store failure hits the destructive half of a move.

    The item may exist in both the archive and its live collection, or in
    neither, until the reconciliation sweep resolves it.
    """

    default_code = "INCONSISTENT_STATE"


class IdentifierCollisionError(StoreFailureError):
    """Raised when creating a live item with an identifier already in use."""

    default_code = "IDENTIFIER_COLLISION"
