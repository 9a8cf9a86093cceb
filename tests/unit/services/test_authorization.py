"""Tests for the archive and restore capability rules."""

import uuid

from productivity_archive.models import ItemType
from productivity_archive.repositories.item_store import ItemStoreAdapter
from productivity_archive.services.authorization import AuthorizationResolver


def _resolver(db_session):
    return AuthorizationResolver(ItemStoreAdapter(db_session))


class TestCanArchive:
    """Test the per-type archive rule."""

    def test_task_assignee(self, db_session, make_task, user_id, other_user_id):
        """Test the assignee may archive a task and a stranger may not."""
        task = make_task()
        resolver = _resolver(db_session)

        assert resolver.can_archive(user_id, task, ItemType.TASK)
        assert not resolver.can_archive(other_user_id, task, ItemType.TASK)

    def test_task_via_project_membership(
        self, db_session, make_project, make_task, other_user_id
    ):
        """Test members of the task's project may archive it."""
        project = make_project(members=[other_user_id])
        task = make_task(assignee_id=None, project_id=project.id)

        assert _resolver(db_session).can_archive(other_user_id, task, "task")

    def test_task_without_assignee_or_project(self, db_session, make_task, user_id):
        """Test nobody may archive an orphaned task."""
        task = make_task(assignee_id=None)

        assert not _resolver(db_session).can_archive(user_id, task, "task")

    def test_project_owner_and_members(
        self, db_session, make_project, user_id, other_user_id
    ):
        """Test owners and members may archive a project."""
        project = make_project(members=[other_user_id])
        resolver = _resolver(db_session)

        assert resolver.can_archive(user_id, project, "project")
        assert resolver.can_archive(other_user_id, project, "project")
        assert not resolver.can_archive(uuid.uuid4(), project, "project")

    def test_single_owner_types(
        self, db_session, make_note, make_bookmark, make_snippet, user_id, other_user_id
    ):
        """Test notes, bookmarks and snippets are owner only."""
        resolver = _resolver(db_session)
        items = [
            (make_note(), "note"),
            (make_bookmark(), "bookmark"),
            (make_snippet(), "snippet"),
        ]

        for item, item_type in items:
            assert resolver.can_archive(user_id, item, item_type)
            assert not resolver.can_archive(other_user_id, item, item_type)

    def test_unknown_type_is_refused(self, db_session, make_note, user_id):
        """Test an unrecognised item type is never authorized."""
        note = make_note()

        assert not _resolver(db_session).can_archive(user_id, note, "calendar")


class TestCanRestore:
    """Test the restore rule."""

    def test_only_record_owner(self, make_record, user_id, other_user_id):
        """Test only the user who archived an item may restore it."""
        record = make_record()

        assert AuthorizationResolver.can_restore(user_id, record)
        assert not AuthorizationResolver.can_restore(other_user_id, record)
