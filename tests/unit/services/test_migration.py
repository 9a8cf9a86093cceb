"""Tests for the bulk migration of completed items."""

from productivity_archive.models import (
    ArchiveRecord,
    ArchiveState,
    ItemType,
    TaskStatus,
)
from productivity_archive.services.migration import BulkArchiver


class TestBulkArchiver:
    """Test candidate selection and the migration run."""

    def test_candidates(self, archive_service, make_task, make_project, make_note):
        """Test only completed tasks, completed projects and archived notes qualify."""
        done = make_task()
        make_task(status=TaskStatus.IN_PROGRESS)
        project = make_project()
        flagged = make_note(archived=True)
        make_note()

        found = {
            (item_type, item.id)
            for item_type, item, _ in BulkArchiver(archive_service).candidates()
        }

        assert found == {
            (ItemType.TASK, done.id),
            (ItemType.PROJECT, project.id),
            (ItemType.NOTE, flagged.id),
        }

    def test_dry_run_only_counts(
        self, archive_service, db_session, make_task, make_note
    ):
        """Test a dry run leaves the live collections untouched."""
        task = make_task()
        make_note(archived=True)

        summary = BulkArchiver(archive_service).run(dry_run=True)

        assert summary.dry_run is True
        assert summary.candidates == {"task": 1, "note": 1}
        assert summary.total_archived == 0
        assert db_session.query(ArchiveRecord).count() == 0
        assert archive_service.items.for_type(ItemType.TASK).exists(task.id)

    def test_run_archives_as_owner(
        self, archive_service, db_session, make_task, make_project, user_id
    ):
        """Test each item is archived with its owner as the acting user."""
        task = make_task()
        make_project()

        summary = BulkArchiver(archive_service).run()

        assert summary.archived == {"task": 1, "project": 1}
        assert summary.total_archived == 2
        records = db_session.query(ArchiveRecord).all()
        assert {r.user_id for r in records} == {user_id}
        assert all(r.state == ArchiveState.ARCHIVED for r in records)
        assert not archive_service.items.for_type(ItemType.TASK).exists(task.id)

    def test_task_without_assignee_is_skipped(self, archive_service, make_task):
        """Test candidates with no owner to act as are skipped."""
        task = make_task(assignee_id=None)

        summary = BulkArchiver(archive_service).run()

        assert summary.skipped == {"task": 1}
        assert summary.total_archived == 0
        assert archive_service.items.for_type(ItemType.TASK).exists(task.id)

    def test_failures_are_counted_and_run_continues(
        self, archive_service, make_note, make_task, make_record
    ):
        """Test a failing item is reported without stopping the run."""
        note = make_note(archived=True)
        make_record(
            original_id=note.id,
            state=ArchiveState.PENDING_ARCHIVE,
            idempotency_key=f"note:{note.id}:archive",
        )
        make_task()

        summary = BulkArchiver(archive_service).run()

        assert summary.failed == {"note": 1}
        assert summary.archived == {"task": 1}
        assert len(summary.errors) == 1
        assert str(note.id) in summary.errors[0]
