"""Tests for RestoreService."""

import uuid
from datetime import datetime, timedelta

import pytest
from sqlalchemy import update

from productivity_archive.core.exceptions import (
    ConflictError,
    ForbiddenError,
    IdentifierCollisionError,
    InconsistentStateError,
    NotFoundError,
    StoreFailureError,
    ValidationError,
)
from productivity_archive.models import (
    ArchiveRecord,
    ArchiveState,
    Bookmark,
    ItemType,
    Priority,
    ProjectStatus,
    Task,
    TaskStatus,
)
from productivity_archive.repositories.archive_store import ArchiveStore
from productivity_archive.repositories.item_store import ItemStore, ItemStoreAdapter
from productivity_archive.services.restore_service import RestoreService
from tests.conftest import NOW


class CollidingStore(ItemStore):
    """Item store that reports an id collision while the adapter allows it."""

    def __init__(self, session, model_class, adapter):
        super().__init__(session, model_class)
        self.adapter = adapter

    def create(self, item):
        if self.adapter.collisions_left > 0:
            self.adapter.collisions_left -= 1
            raise IdentifierCollisionError(f"id {item.id} is already in use")
        return super().create(item)


class CollidingAdapter(ItemStoreAdapter):
    """Adapter whose stores collide a fixed number of times."""

    def __init__(self, session, collisions=1):
        super().__init__(session)
        self.collisions_left = collisions

    def for_type(self, item_type):
        store = super().for_type(item_type)
        return CollidingStore(self.session, store.model_class, self)


class FailingCreateAdapter(ItemStoreAdapter):
    """Adapter whose stores raise ``error`` on create."""

    def __init__(self, session, error=None):
        super().__init__(session)
        self.error = error or StoreFailureError("connection reset")

    def for_type(self, item_type):
        store = super().for_type(item_type)
        error = self.error

        class FailingCreateStore(ItemStore):
            def create(self, item):
                raise error

        return FailingCreateStore(self.session, store.model_class)


class UndeletableArchiveStore(ArchiveStore):
    """Archive store that cannot delete records."""

    def delete(self, record):
        raise StoreFailureError("connection reset")


class RacingArchiveStore(ArchiveStore):
    """Archive store where another request claims the record right after lookup."""

    def get(self, record_id, state=ArchiveState.ARCHIVED):
        record = super().get(record_id, state)
        self.session.execute(
            update(ArchiveRecord)
            .where(ArchiveRecord.id == record_id)
            .values(state=ArchiveState.PENDING_RESTORE)
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        return record


def _service(db_session, settings, clock, audit_sink, **kwargs):
    return RestoreService(
        db_session, settings=settings, clock=clock, audit_sink=audit_sink, **kwargs
    )


class TestRestoreRoundTrip:
    """Test archive followed by restore for each item type."""

    def test_task_with_overdue_date(
        self, archive_service, restore_service, make_task, user_id, db_session
    ):
        """Test a restored task is in progress with a fresh deadline."""
        task = make_task(due_date=NOW - timedelta(days=1), estimated_time=4.0)
        task_id = task.id
        record = archive_service.archive_item(user_id, "task", task_id)
        assert record.completion_time == 3 * 24 * 60 * 60 * 1000

        result = restore_service.restore_item(user_id, record.id)

        restored = result.item
        assert result.item_type == ItemType.TASK
        assert result.reused_original_id is True
        assert restored.id == task_id
        assert restored.title == "Write quarterly report"
        assert restored.description == "Numbers for Q1"
        assert restored.priority == Priority.HIGH
        assert restored.status == TaskStatus.IN_PROGRESS
        assert restored.assignee_id == user_id
        assert restored.estimated_time == 4.0
        assert restored.due_date == NOW + timedelta(days=7)
        assert restored.created_at == NOW - timedelta(days=3)
        assert db_session.get(ArchiveRecord, record.id) is None

    def test_task_with_future_date_keeps_it(
        self, archive_service, restore_service, make_task, user_id
    ):
        """Test due dates that are still ahead are kept."""
        due = NOW + timedelta(days=2)
        task = make_task(due_date=due)
        record = archive_service.archive_item(user_id, "task", task.id)

        restored = restore_service.restore_item(user_id, record.id).item

        assert restored.due_date == due

    def test_project(
        self, archive_service, restore_service, make_project, user_id, other_user_id
    ):
        """Test a restored project is active with its members and a new end date."""
        project = make_project(members=[other_user_id])
        record = archive_service.archive_item(user_id, "project", project.id)

        restored = restore_service.restore_item(user_id, record.id).item

        assert restored.name == "Website relaunch"
        assert restored.description == "New landing pages"
        assert restored.status == ProjectStatus.ACTIVE
        assert restored.owner_id == user_id
        assert restored.member_ids == [other_user_id]
        assert restored.progress == 100
        assert restored.start_date == NOW - timedelta(days=60)
        assert restored.end_date == datetime(2024, 4, 15, 14, 30)

    def test_project_round_trip_keeps_task_links(
        self, archive_service, restore_service, make_project, make_task, db_session
    ):
        """Test live tasks keep pointing at a project while it is archived."""
        project = make_project()
        project_id = project.id
        task = make_task(status=TaskStatus.IN_PROGRESS, project_id=project_id)
        task_id = task.id
        owner = project.owner_id

        record = archive_service.archive_item(owner, "project", project_id)
        db_session.expire_all()
        assert db_session.get(Task, task_id).project_id == project_id

        result = restore_service.restore_item(owner, record.id)
        db_session.expire_all()

        assert result.reused_original_id
        linked = db_session.get(Task, task_id)
        assert linked.project_id == project_id
        assert restore_service.items.get_project(linked.project_id) is not None

    def test_task_restores_while_its_project_is_archived(
        self, archive_service, restore_service, make_project, make_task, user_id
    ):
        """Test a task comes back with its project id even if the project is gone."""
        project = make_project()
        project_id = project.id
        task = make_task(project_id=project_id)
        task_record = archive_service.archive_item(user_id, "task", task.id)
        archive_service.archive_item(user_id, "project", project_id)

        restored = restore_service.restore_item(user_id, task_record.id).item

        assert restored.project_id == project_id
        assert restore_service.items.get_project(project_id) is None

    def test_project_without_members_falls_back_to_acting_user(
        self, restore_service, make_record, user_id
    ):
        """Test owner and members default to the acting user."""
        record = make_record(
            item_type=ItemType.PROJECT,
            title="Legacy project",
            item_metadata={"item_type": "project", "original_collection": "projects"},
        )

        restored = restore_service.restore_item(user_id, record.id).item

        assert restored.owner_id == user_id
        assert restored.member_ids == [user_id]
        assert restored.end_date is None

    def test_note(self, archive_service, restore_service, make_note, user_id):
        """Test a restored note is no longer flagged archived."""
        note = make_note(archived=True)
        record = archive_service.archive_item(user_id, "note", note.id)

        restored = restore_service.restore_item(user_id, record.id).item

        assert restored.archived is False
        assert restored.title == "Meeting notes"
        assert restored.content == "Decisions and follow-ups"
        assert restored.tags == ["work", "weekly"]
        assert restored.color == "yellow"
        assert restored.user_id == user_id

    def test_bookmark(self, archive_service, restore_service, make_bookmark, user_id):
        """Test a restored bookmark keeps its URL and folder."""
        bookmark = make_bookmark()
        record = archive_service.archive_item(user_id, "bookmark", bookmark.id)

        restored = restore_service.restore_item(user_id, record.id).item

        assert restored.url == "https://docs.sqlalchemy.org/"
        assert restored.folder_id == "reading"
        assert restored.description == "ORM reference"

    def test_snippet_language_defaults_to_text(
        self, restore_service, make_record, user_id
    ):
        """Test snippets without a stored language come back as text."""
        record = make_record(
            item_type=ItemType.SNIPPET,
            title="Shell alias",
            description="alias ll='ls -la'",
            item_metadata={"item_type": "snippet", "original_collection": "snippets"},
        )

        restored = restore_service.restore_item(user_id, record.id).item

        assert restored.language == "text"
        assert restored.content == "alias ll='ls -la'"

    def test_success_is_audited(
        self, archive_service, restore_service, make_note, user_id, audit_sink
    ):
        """Test the audit sink hears about successful restores."""
        note = make_note()
        record = archive_service.archive_item(user_id, "note", note.id)

        restore_service.restore_item(user_id, record.id)

        event = audit_sink.events[-1]
        assert event["action"] == "note_restore"
        assert event["outcome"] == "success"
        assert event["archive_id"] == str(record.id)


class TestRestoreFailures:
    """Test restore refusals and failure handling."""

    def test_missing_record(self, restore_service, user_id):
        """Test unknown record ids."""
        with pytest.raises(NotFoundError):
            restore_service.restore_item(user_id, uuid.uuid4())

    def test_pending_record_is_not_restorable(
        self, restore_service, make_record, user_id
    ):
        """Test records mid-move are invisible to restore."""
        record = make_record(state=ArchiveState.PENDING_ARCHIVE)

        with pytest.raises(NotFoundError):
            restore_service.restore_item(user_id, record.id)

    def test_other_users_record(self, restore_service, make_record, other_user_id):
        """Test only the record owner may restore."""
        record = make_record()

        with pytest.raises(ForbiddenError):
            restore_service.restore_item(other_user_id, record.id)

    def test_original_still_exists(
        self, restore_service, make_note, make_record, user_id, db_session
    ):
        """Test restore never overwrites a live item."""
        note = make_note(title="Live note")
        record = make_record(original_id=note.id, title="Archived copy")

        with pytest.raises(ConflictError):
            restore_service.restore_item(user_id, record.id)

        db_session.expire_all()
        stored = db_session.get(ArchiveRecord, record.id)
        assert stored.state == ArchiveState.ARCHIVED
        assert stored.restored_item_id is None
        live = restore_service.items.for_type(ItemType.NOTE).get(note.id)
        assert live.title == "Live note"

    def test_bookmark_without_url(
        self, restore_service, make_record, user_id, db_session
    ):
        """Test bookmarks need a URL and a failed restore writes nothing."""
        record = make_record(
            item_type=ItemType.BOOKMARK,
            title="Broken bookmark",
            item_metadata={"item_type": "bookmark", "original_collection": "bookmarks"},
        )

        with pytest.raises(ValidationError):
            restore_service.restore_item(user_id, record.id)

        db_session.expire_all()
        assert db_session.get(ArchiveRecord, record.id).state == ArchiveState.ARCHIVED
        assert db_session.query(Bookmark).count() == 0

    def test_invalid_metadata(self, restore_service, make_record, user_id):
        """Test metadata that does not fit the type's bag is rejected."""
        record = make_record(
            item_type=ItemType.TASK,
            item_metadata={
                "item_type": "task",
                "original_collection": "tasks",
                "unexpected": True,
            },
        )

        with pytest.raises(ValidationError):
            restore_service.restore_item(user_id, record.id)

    def test_concurrent_restore_conflicts(
        self, db_session, settings, clock, audit_sink, make_record, user_id
    ):
        """Test losing the claim to another request is a conflict."""
        record = make_record()
        service = _service(
            db_session,
            settings,
            clock,
            audit_sink,
            archive=RacingArchiveStore(db_session),
        )

        with pytest.raises(ConflictError):
            service.restore_item(user_id, record.id)

        assert audit_sink.events == []

    def test_identifier_collision_retries_with_new_id(
        self, db_session, settings, clock, audit_sink, make_record, user_id
    ):
        """Test one collision falls back to a freshly generated id."""
        record = make_record(title="Colliding note")
        service = _service(
            db_session, settings, clock, audit_sink, items=CollidingAdapter(db_session)
        )

        result = service.restore_item(user_id, record.id)

        assert result.reused_original_id is False
        assert result.item.id != record.original_id
        assert result.item.title == "Colliding note"
        assert db_session.get(ArchiveRecord, record.id) is None

    def test_second_collision_is_not_retried(
        self, db_session, settings, clock, audit_sink, make_record, user_id
    ):
        """Test the collision retry happens at most once."""
        record = make_record()
        service = _service(
            db_session,
            settings,
            clock,
            audit_sink,
            items=CollidingAdapter(db_session, collisions=2),
        )

        with pytest.raises(IdentifierCollisionError):
            service.restore_item(user_id, record.id)

        db_session.expire_all()
        stored = db_session.get(ArchiveRecord, record.id)
        assert stored.state == ArchiveState.ARCHIVED
        assert stored.restored_item_id is None

    def test_failed_create_releases_claim(
        self, db_session, settings, clock, audit_sink, make_record, user_id
    ):
        """Test a failed create puts the record back to archived."""
        record = make_record()
        service = _service(
            db_session,
            settings,
            clock,
            audit_sink,
            items=FailingCreateAdapter(db_session),
        )

        with pytest.raises(StoreFailureError):
            service.restore_item(user_id, record.id)

        db_session.expire_all()
        assert db_session.get(ArchiveRecord, record.id).state == ArchiveState.ARCHIVED

    def test_unexpected_create_error_releases_claim(
        self, db_session, settings, clock, audit_sink, make_record, user_id
    ):
        """Test errors outside the archive hierarchy also release the claim."""
        record = make_record()
        service = _service(
            db_session,
            settings,
            clock,
            audit_sink,
            items=FailingCreateAdapter(db_session, error=TypeError("bad field")),
        )

        with pytest.raises(TypeError):
            service.restore_item(user_id, record.id)

        db_session.expire_all()
        assert db_session.get(ArchiveRecord, record.id).state == ArchiveState.ARCHIVED

    def test_failed_record_delete_is_inconsistent(
        self, db_session, settings, clock, audit_sink, make_record, user_id
    ):
        """Test the live item survives and the record waits for reconciliation."""
        record = make_record()
        service = _service(
            db_session,
            settings,
            clock,
            audit_sink,
            archive=UndeletableArchiveStore(db_session),
        )

        with pytest.raises(InconsistentStateError):
            service.restore_item(user_id, record.id)

        db_session.expire_all()
        stored = db_session.get(ArchiveRecord, record.id)
        assert stored.state == ArchiveState.PENDING_RESTORE
        assert stored.restored_item_id == record.original_id
        assert service.items.for_type(ItemType.NOTE).exists(record.original_id)
