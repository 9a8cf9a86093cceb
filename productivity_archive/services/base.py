"""Base service class for common functionality."""

from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from productivity_archive.config import Settings, get_settings
from productivity_archive.core.exceptions import StoreFailureError
from productivity_archive.repositories.archive_store import ArchiveStore
from productivity_archive.repositories.item_store import ItemStoreAdapter
from productivity_archive.services.audit import AuditSink, LoggingAuditSink
from productivity_archive.utils.dates import utcnow
from productivity_archive.utils.logging import get_logger

logger = get_logger(__name__)


class BaseService:
    """Wires the stores, settings, clock and audit sink shared by services."""

    def __init__(
        self,
        session: Session,
        settings: Optional[Settings] = None,
        audit_sink: Optional[AuditSink] = None,
        clock: Optional[Callable[[], datetime]] = None,
        items: Optional[ItemStoreAdapter] = None,
        archive: Optional[ArchiveStore] = None,
    ):
        """Initialize service with database session."""
        self.session = session
        self.settings = settings or get_settings()
        self.audit_sink: AuditSink = audit_sink or LoggingAuditSink()
        self.clock = clock or utcnow
        self.items = items or ItemStoreAdapter(session)
        self.archive = archive or ArchiveStore(session)

    def now(self) -> datetime:
        """Current time from the injected clock."""
        return self.clock()

    def commit(self) -> None:
        """Commit the current phase, rolling back on failure."""
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            logger.error("commit_failed", error=str(e))
            self.session.rollback()
            raise StoreFailureError(f"Error committing transaction: {e}") from e

    def rollback(self) -> None:
        """Discard uncommitted work."""
        self.session.rollback()
