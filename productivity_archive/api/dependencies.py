"""FastAPI dependencies shared by the archive endpoints."""

import uuid
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from productivity_archive.core.database import get_db
from productivity_archive.services.archive_service import ArchiveService
from productivity_archive.services.audit import AuditSink, LoggingAuditSink
from productivity_archive.services.restore_service import RestoreService
from productivity_archive.utils.logging import get_logger

logger = get_logger(__name__)

# Module-level dependency variables to avoid B008 errors
db_dependency = Depends(get_db)
user_id_header = Header(None, alias="X-User-Id")


def get_current_user_id(x_user_id: Optional[str] = user_id_header) -> uuid.UUID:
    """Acting user id, taken from the ``X-User-Id`` header."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    try:
        return uuid.UUID(x_user_id)
    except ValueError as e:
        logger.warning("invalid_user_header", value=x_user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid X-User-Id header",
        ) from e


def get_audit_sink() -> AuditSink:
    """Audit sink used by request-scoped services."""
    return LoggingAuditSink()


audit_sink_dependency = Depends(get_audit_sink)


def get_archive_service(
    db: Session = db_dependency, audit_sink: AuditSink = audit_sink_dependency
) -> ArchiveService:
    """Archive service bound to the request session."""
    return ArchiveService(db, audit_sink=audit_sink)


def get_restore_service(
    db: Session = db_dependency, audit_sink: AuditSink = audit_sink_dependency
) -> RestoreService:
    """Restore service bound to the request session."""
    return RestoreService(db, audit_sink=audit_sink)
