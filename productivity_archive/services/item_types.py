"""Per-type rules for archiving and restoring live items.

Every archivable item type has one handler, registered by its ``ItemType``.
A handler knows how to:

- flatten the native item onto the archive's ``title``/``description`` fields
  and extract the remaining fields into the type's metadata bag,
- rebuild a draft of the native item from an archive record,
- decide whether a user may act on the item.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Type

from pydantic import ValidationError as PydanticValidationError

from productivity_archive.core.exceptions import ValidationError
from productivity_archive.models import (
    ArchiveRecord,
    BaseModel,
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
from productivity_archive.repositories.item_store import ItemStoreAdapter
from productivity_archive.schemas.metadata import (
    BookmarkMetadata,
    MetadataBag,
    NoteMetadata,
    ProjectMetadata,
    SnippetMetadata,
    TaskMetadata,
    parse_metadata,
)
from productivity_archive.utils.dates import add_months, to_naive_utc

UNTITLED = "Untitled"


@dataclass
class RestoreContext:
    """Inputs shared by every reconstruction."""

    acting_user_id: uuid.UUID
    now: datetime
    due_date_shift_days: int = 7
    end_date_shift_months: int = 1


class ItemTypeHandler:
    """Base handler; subclasses fill in the type-specific parts."""

    item_type: ItemType
    model_class: Type[BaseModel]
    title_field = "title"
    body_field = "description"
    requires_completion = False

    def title_of(self, item: Any) -> str:
        """Title-like field of the native item."""
        return getattr(item, self.title_field, None) or UNTITLED

    def description_of(self, item: Any) -> str:
        """Body-like field of the native item."""
        return getattr(item, self.body_field, None) or ""

    def is_completed(self, item: Any) -> bool:
        """Whether the item may be archived; only gated types override this."""
        return True

    def priority_of(self, item: Any) -> Optional[Priority]:
        """Priority of the item, if the type has one."""
        return Priority.normalize(getattr(item, "priority", None))

    def project_of(self, item: Any) -> Optional[uuid.UUID]:
        """Project the item belongs to, if any."""
        return None

    def extract_metadata(self, item: Any) -> MetadataBag:
        """Reduce the native item to its metadata bag."""
        raise NotImplementedError

    def authorize(self, user_id: uuid.UUID, item: Any, items: ItemStoreAdapter) -> bool:
        """Single-owner rule used by notes, bookmarks and snippets."""
        owner_id = getattr(item, "user_id", None)
        return owner_id is not None and owner_id == user_id

    def reconstruct(self, record: ArchiveRecord, ctx: RestoreContext) -> Dict[str, Any]:
        """Build the native field values for a restored item."""
        try:
            metadata = parse_metadata(self.item_type, record.item_metadata)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Archived {self.item_type.value} has invalid metadata: "
                f"{e.error_count()} error(s)"
            ) from e
        draft: Dict[str, Any] = {
            self.title_field: record.title,
            self.body_field: record.description or "",
            "created_at": record.created_at,
        }
        draft.update(self._reconstruct_fields(record, metadata, ctx))
        return draft

    def _reconstruct_fields(
        self, record: ArchiveRecord, metadata: Any, ctx: RestoreContext
    ) -> Dict[str, Any]:
        raise NotImplementedError

    def instantiate(self, draft: Dict[str, Any], item_id: uuid.UUID) -> BaseModel:
        """Create an unsaved model instance from a draft."""
        return self.model_class(id=item_id, **draft)


class TaskHandler(ItemTypeHandler):
    """Tasks: status gated, assignee or project members may act."""

    item_type = ItemType.TASK
    model_class = Task
    requires_completion = True

    def is_completed(self, item: Task) -> bool:
        return item.status == TaskStatus.COMPLETED

    def project_of(self, item: Task) -> Optional[uuid.UUID]:
        return item.project_id

    def extract_metadata(self, item: Task) -> TaskMetadata:
        return TaskMetadata(
            original_collection=self.item_type.collection,
            assignee=item.assignee_id,
            due_date=item.due_date,
            estimated_time=item.estimated_time,
        )

    def authorize(
        self, user_id: uuid.UUID, item: Task, items: ItemStoreAdapter
    ) -> bool:
        if item.assignee_id is not None and item.assignee_id == user_id:
            return True
        project = items.get_project(item.project_id)
        return project is not None and project.has_member(user_id)

    def _reconstruct_fields(
        self, record: ArchiveRecord, metadata: TaskMetadata, ctx: RestoreContext
    ) -> Dict[str, Any]:
        due_date = metadata.due_date
        if due_date is not None:
            due_date = to_naive_utc(due_date)
            # Overdue tasks come back with a fresh deadline
            if due_date < ctx.now:
                due_date = ctx.now + timedelta(days=ctx.due_date_shift_days)
        return {
            "status": TaskStatus.IN_PROGRESS,
            "priority": record.priority,
            "assignee_id": metadata.assignee or ctx.acting_user_id,
            "project_id": record.project_id,
            "due_date": due_date,
            "estimated_time": metadata.estimated_time,
        }


class ProjectHandler(ItemTypeHandler):
    """Projects: status gated, owner or members may act."""

    item_type = ItemType.PROJECT
    model_class = Project
    title_field = "name"
    requires_completion = True

    def is_completed(self, item: Project) -> bool:
        return item.status == ProjectStatus.COMPLETED

    def extract_metadata(self, item: Project) -> ProjectMetadata:
        return ProjectMetadata(
            original_collection=self.item_type.collection,
            owner=item.owner_id,
            members=item.member_ids,
            start_date=item.start_date,
            end_date=item.end_date,
            progress=item.progress,
        )

    def authorize(
        self, user_id: uuid.UUID, item: Project, items: ItemStoreAdapter
    ) -> bool:
        return item.has_member(user_id)

    def _reconstruct_fields(
        self, record: ArchiveRecord, metadata: ProjectMetadata, ctx: RestoreContext
    ) -> Dict[str, Any]:
        end_date = metadata.end_date
        if end_date is not None:
            end_date = to_naive_utc(end_date)
            if end_date < ctx.now:
                end_date = add_months(ctx.now, ctx.end_date_shift_months)
        start_date = metadata.start_date
        return {
            "status": ProjectStatus.ACTIVE,
            "priority": record.priority,
            "owner_id": metadata.owner or ctx.acting_user_id,
            "members": list(metadata.members) or [ctx.acting_user_id],
            "start_date": to_naive_utc(start_date) if start_date else None,
            "end_date": end_date,
            "progress": metadata.progress or 0,
        }

    def instantiate(self, draft: Dict[str, Any], item_id: uuid.UUID) -> Project:
        fields = dict(draft)
        members = fields.pop("members", [])
        project = Project(id=item_id, **fields)
        project.set_members(members)
        return project


class NoteHandler(ItemTypeHandler):
    """Notes: owned by a single user, body lives in ``content``."""

    item_type = ItemType.NOTE
    model_class = Note
    body_field = "content"

    def extract_metadata(self, item: Note) -> NoteMetadata:
        return NoteMetadata(
            original_collection=self.item_type.collection,
            tags=list(item.tags or []),
            color=item.color,
        )

    def _reconstruct_fields(
        self, record: ArchiveRecord, metadata: NoteMetadata, ctx: RestoreContext
    ) -> Dict[str, Any]:
        return {
            "user_id": ctx.acting_user_id,
            "archived": False,
            "tags": list(metadata.tags),
            "color": metadata.color,
        }


class BookmarkHandler(ItemTypeHandler):
    """Bookmarks: a URL is mandatory to restore."""

    item_type = ItemType.BOOKMARK
    model_class = Bookmark

    def extract_metadata(self, item: Bookmark) -> BookmarkMetadata:
        return BookmarkMetadata(
            original_collection=self.item_type.collection,
            url=item.url,
            folder=item.folder_id,
        )

    def _reconstruct_fields(
        self, record: ArchiveRecord, metadata: BookmarkMetadata, ctx: RestoreContext
    ) -> Dict[str, Any]:
        if not metadata.url:
            raise ValidationError("Cannot restore bookmark: missing URL")
        return {
            "user_id": ctx.acting_user_id,
            "url": metadata.url,
            "folder_id": metadata.folder,
        }


class SnippetHandler(ItemTypeHandler):
    """Snippets: body lives in ``content``, language defaults to text."""

    item_type = ItemType.SNIPPET
    model_class = Snippet
    body_field = "content"

    def extract_metadata(self, item: Snippet) -> SnippetMetadata:
        return SnippetMetadata(
            original_collection=self.item_type.collection,
            language=item.language,
            tags=list(item.tags or []),
            category=item.category,
        )

    def _reconstruct_fields(
        self, record: ArchiveRecord, metadata: SnippetMetadata, ctx: RestoreContext
    ) -> Dict[str, Any]:
        return {
            "user_id": ctx.acting_user_id,
            "language": metadata.language or "text",
            "tags": list(metadata.tags),
            "category": metadata.category,
        }


HANDLERS: Dict[ItemType, ItemTypeHandler] = {
    handler.item_type: handler
    for handler in (
        TaskHandler(),
        ProjectHandler(),
        NoteHandler(),
        BookmarkHandler(),
        SnippetHandler(),
    )
}


def get_handler(item_type: ItemType) -> ItemTypeHandler:
    """Look up the handler registered for ``item_type``."""
    return HANDLERS[item_type]
