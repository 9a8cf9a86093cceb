"""Audit notifications for archive and restore events.

Sinks are fire-and-forget: a failing sink is logged and never fails the
archive or restore operation that notified it.
"""

import uuid
from typing import Any, Dict, Optional, Protocol

from productivity_archive.utils.logging import AuditLogger, get_logger

logger = get_logger(__name__)


class AuditSink(Protocol):
    """Receiver of archive lifecycle events."""

    def record(
        self, user_id: uuid.UUID, action: str, outcome: str, details: Dict[str, Any]
    ) -> None:
        """Record one event."""


class LoggingAuditSink:
    """Default sink writing structured audit log entries."""

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        """Initialize sink."""
        self.audit_logger = audit_logger or AuditLogger()

    def record(
        self, user_id: uuid.UUID, action: str, outcome: str, details: Dict[str, Any]
    ) -> None:
        """Write the event to the audit log."""
        self.audit_logger.log_move(
            user_id=str(user_id), action=action, outcome=outcome, details=details
        )


def notify(
    sink: Optional[AuditSink],
    user_id: uuid.UUID,
    action: str,
    outcome: str,
    **details: Any,
) -> None:
    """Deliver an event to ``sink`` without letting sink errors escape."""
    if sink is None:
        return
    try:
        sink.record(user_id, action, outcome, details)
    except Exception as e:  # pylint: disable=broad-except
        logger.warning(
            "audit_sink_failed",
            action=action,
            user_id=str(user_id),
            error=str(e),
        )
