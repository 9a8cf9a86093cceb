"""Mapping of archive errors onto HTTP responses."""

from typing import Dict

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from productivity_archive.core.exceptions import ArchiveError
from productivity_archive.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_BY_CODE: Dict[str, int] = {
    "INVALID_ITEM_TYPE": status.HTTP_400_BAD_REQUEST,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "INVALID_STATE": status.HTTP_400_BAD_REQUEST,
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "INVALID_RANGE": status.HTTP_400_BAD_REQUEST,
    "STORE_FAILURE": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "INCONSISTENT_STATE": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(error: ArchiveError) -> int:
    """HTTP status for an archive error code."""
    return STATUS_BY_CODE.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def archive_error_handler(request: Request, exc: ArchiveError) -> JSONResponse:
    """Render an ArchiveError as ``{success, error, message}``."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(
            "archive_request_failed",
            path=request.url.path,
            code=exc.code,
            message=exc.message,
        )
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": exc.code, "message": exc.message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the archive error handler on ``app``."""
    app.add_exception_handler(ArchiveError, archive_error_handler)
