"""API module for the productivity archive."""

from .archive_endpoints import router as archive_router
from .errors import register_exception_handlers

__all__ = ["archive_router", "register_exception_handlers"]
