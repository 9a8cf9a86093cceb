"""Service layer: archival, restore, analytics and maintenance of the archive."""

from .archive_service import ArchiveService
from .audit import AuditSink, LoggingAuditSink
from .authorization import AuthorizationResolver
from .base import BaseService
from .migration import BulkArchiver, MigrationSummary
from .reconciliation import ReconciliationReport, ReconciliationService
from .restore_service import RestoreResult, RestoreService

__all__ = [
    "BaseService",
    "ArchiveService",
    "RestoreService",
    "RestoreResult",
    "ReconciliationService",
    "ReconciliationReport",
    "BulkArchiver",
    "MigrationSummary",
    "AuthorizationResolver",
    "AuditSink",
    "LoggingAuditSink",
]
