"""Logging configuration for the productivity archive."""

import logging
import sys
from typing import Any, Dict, MutableMapping, Optional

import structlog
from structlog.stdlib import BoundLogger, LoggerFactory

from productivity_archive.config import Settings, get_settings

# Third-party loggers that drown out archive events at INFO
NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "alembic.runtime.migration")


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure structured logging for the API and the maintenance scripts."""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    if not settings.debug:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            service_context(settings),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            render_processor(settings),
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=True,
    )


def service_context(settings: Settings) -> Any:
    """Processor stamping every event with the service name and environment."""

    def add_service_context(
        logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        event_dict.setdefault("service", settings.app_name)
        event_dict.setdefault("environment", settings.environment)
        return event_dict

    return add_service_context


def render_processor(settings: Settings) -> Any:
    """JSON lines for log shipping, coloured console output otherwise."""
    if settings.log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer()


def get_logger(name: str) -> BoundLogger:
    """Get a configured logger instance."""
    bound_logger: BoundLogger = structlog.get_logger(name)
    return bound_logger


class AuditLogger:
    """Writes the audit trail of archive and restore moves."""

    def __init__(self) -> None:
        """Initialize audit logger."""
        self.logger = get_logger("productivity_archive.audit")

    def log_move(
        self,
        user_id: str,
        action: str,
        outcome: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log one archive or restore attempt.

        ``action`` is ``<item_type>_<operation>``, e.g. ``task_archive``.
        Failed moves are logged at warning level.
        """
        item_type, _, operation = action.partition("_")
        log = self.logger.warning if outcome == "failed" else self.logger.info
        log(
            "archive_audit",
            user_id=user_id,
            item_type=item_type,
            operation=operation,
            outcome=outcome,
            **(details or {}),
        )
