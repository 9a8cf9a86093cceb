"""Test configuration for the productivity archive.

Every test runs against a fresh in-memory SQLite database sharing a single
connection (``StaticPool``) so services, stores and the API client see the
same data.
"""

import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from productivity_archive.config import Settings
from productivity_archive.core.database import build_session_factory, drop_db, init_db
from productivity_archive.models import (
    ArchiveRecord,
    ArchiveState,
    Bookmark,
    ItemType,
    Note,
    Priority,
    Project,
    ProjectStatus,
    Snippet,
    Task,
    TaskStatus,
)
from productivity_archive.services.archive_service import ArchiveService
from productivity_archive.services.restore_service import RestoreService

# Friday afternoon
NOW = datetime(2024, 3, 15, 14, 30, 0)


class RecordingAuditSink:
    """Audit sink that keeps every event in memory."""

    def __init__(self) -> None:
        self.events: List[Dict[str, Any]] = []

    def record(
        self, user_id: uuid.UUID, action: str, outcome: str, details: Dict[str, Any]
    ) -> None:
        self.events.append(
            {"user_id": user_id, "action": action, "outcome": outcome, **details}
        )


class FailingAuditSink:
    """Audit sink that always raises."""

    def record(self, *args: Any, **kwargs: Any) -> None:
        raise RuntimeError("audit backend unavailable")


@pytest.fixture
def engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Session bound to the in-memory engine."""
    session = build_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, database_url="sqlite://")


@pytest.fixture
def clock():
    """Fixed clock returning NOW."""
    return lambda: NOW


@pytest.fixture
def audit_sink():
    """Recording audit sink."""
    return RecordingAuditSink()


@pytest.fixture
def user_id():
    """Acting user."""
    return uuid.uuid4()


@pytest.fixture
def other_user_id():
    """A second, unrelated user."""
    return uuid.uuid4()


@pytest.fixture
def archive_service(db_session, settings, audit_sink, clock):
    """ArchiveService wired to the test database and fixed clock."""
    return ArchiveService(
        db_session, settings=settings, audit_sink=audit_sink, clock=clock
    )


@pytest.fixture
def restore_service(db_session, settings, audit_sink, clock):
    """RestoreService wired to the test database and fixed clock."""
    return RestoreService(
        db_session, settings=settings, audit_sink=audit_sink, clock=clock
    )


def _persist(session, item):
    session.add(item)
    session.commit()
    return item


@pytest.fixture
def make_task(db_session, user_id) -> Callable[..., Task]:
    """Factory for persisted tasks, completed and assigned to ``user_id``."""

    def factory(**overrides: Any) -> Task:
        fields: Dict[str, Any] = {
            "title": "Write quarterly report",
            "description": "Numbers for Q1",
            "status": TaskStatus.COMPLETED,
            "priority": Priority.HIGH,
            "assignee_id": user_id,
            "created_at": NOW - timedelta(days=3),
        }
        fields.update(overrides)
        return _persist(db_session, Task(**fields))

    return factory


@pytest.fixture
def make_project(db_session, user_id) -> Callable[..., Project]:
    """Factory for persisted projects owned by ``user_id``."""

    def factory(members=None, **overrides: Any) -> Project:
        fields: Dict[str, Any] = {
            "name": "Website relaunch",
            "description": "New landing pages",
            "owner_id": user_id,
            "status": ProjectStatus.COMPLETED,
            "priority": Priority.MEDIUM,
            "start_date": NOW - timedelta(days=60),
            "end_date": NOW - timedelta(days=5),
            "progress": 100,
            "created_at": NOW - timedelta(days=60),
        }
        fields.update(overrides)
        project = Project(**fields)
        project.set_members(members or [])
        return _persist(db_session, project)

    return factory


@pytest.fixture
def make_note(db_session, user_id) -> Callable[..., Note]:
    """Factory for persisted notes owned by ``user_id``."""

    def factory(**overrides: Any) -> Note:
        fields: Dict[str, Any] = {
            "user_id": user_id,
            "title": "Meeting notes",
            "content": "Decisions and follow-ups",
            "tags": ["work", "weekly"],
            "color": "yellow",
            "created_at": NOW - timedelta(hours=5),
        }
        fields.update(overrides)
        return _persist(db_session, Note(**fields))

    return factory


@pytest.fixture
def make_bookmark(db_session, user_id) -> Callable[..., Bookmark]:
    """Factory for persisted bookmarks owned by ``user_id``."""

    def factory(**overrides: Any) -> Bookmark:
        fields: Dict[str, Any] = {
            "user_id": user_id,
            "title": "SQLAlchemy docs",
            "url": "https://docs.sqlalchemy.org/",
            "description": "ORM reference",
            "folder_id": "reading",
        }
        fields.update(overrides)
        return _persist(db_session, Bookmark(**fields))

    return factory


@pytest.fixture
def make_snippet(db_session, user_id) -> Callable[..., Snippet]:
    """Factory for persisted snippets owned by ``user_id``."""

    def factory(**overrides: Any) -> Snippet:
        fields: Dict[str, Any] = {
            "user_id": user_id,
            "title": "Retry decorator",
            "content": "def retry(): ...",
            "language": "python",
            "tags": ["utils"],
            "category": "helpers",
        }
        fields.update(overrides)
        return _persist(db_session, Snippet(**fields))

    return factory


@pytest.fixture
def make_record(db_session, user_id) -> Callable[..., ArchiveRecord]:
    """Factory for archive records written directly to the store."""

    def factory(**overrides: Any) -> ArchiveRecord:
        fields: Dict[str, Any] = {
            "user_id": user_id,
            "item_type": ItemType.NOTE,
            "original_id": uuid.uuid4(),
            "title": "Archived note",
            "description": "",
            "created_at": NOW - timedelta(days=1),
            "completed_at": NOW,
            "completion_time": 24 * 60 * 60 * 1000,
            "item_metadata": {"item_type": "note", "original_collection": "notes"},
            "state": ArchiveState.ARCHIVED,
        }
        fields.update(overrides)
        return _persist(db_session, ArchiveRecord(**fields))

    return factory
