"""Digital notebook hook."""

import logging
from uuid import UUID

from agrostudy.gateway.base import NOTES, SUBJECT_JOIN, OrderBy
from agrostudy.hooks.resource import ResourceConfig, ResourceHook, crud_messages
from agrostudy.schemas.notes import NoteAttachment, NoteCreate, NoteRead, NoteUpdate

logger = logging.getLogger(__name__)

NOTE_CONFIG = ResourceConfig(
    entity="note",
    collection=NOTES,
    read_schema=NoteRead,
    create_schema=NoteCreate,
    update_schema=NoteUpdate,
    order_by=(OrderBy("created_at", descending=True),),
    joins=(SUBJECT_JOIN,),
    messages=crud_messages("anotação", "anotações"),
)


class NotesHook(ResourceHook[NoteRead]):
    """
    Notes of the current identity, newest first.

    Attachments picked in the editor are kept per note in memory only;
    they are never uploaded and disappear when the hook resets.
    """

    config = NOTE_CONFIG

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.attachments: dict[UUID, list[NoteAttachment]] = {}

    def reset(self) -> None:
        super().reset()
        self.attachments = {}

    def attach(self, note_id: UUID, attachment: NoteAttachment | dict) -> bool:
        """Hold an attachment for a loaded note."""
        if self.get(note_id) is None:
            return False
        if isinstance(attachment, dict):
            attachment = NoteAttachment.model_validate(attachment)
        self.attachments.setdefault(note_id, []).append(attachment)
        logger.debug("Holding attachment %s for note %s", attachment.file_name, note_id)
        return True

    def attachments_for(self, note_id: UUID) -> list[NoteAttachment]:
        return list(self.attachments.get(note_id, []))

    async def delete(self, id: UUID) -> bool:
        deleted = await super().delete(id)
        if deleted:
            self.attachments.pop(id, None)
        return deleted

    def by_subject(self, subject_id: UUID | None) -> list[NoteRead]:
        return [note for note in self.items if note.subject_id == subject_id]

    def search(self, query: str) -> list[NoteRead]:
        """Case-insensitive match on title, content and tags."""
        needle = query.strip().lower()
        if not needle:
            return list(self.items)
        return [
            note
            for note in self.items
            if needle in note.title.lower()
            or needle in note.content_md.lower()
            or any(needle in tag.lower() for tag in note.tags)
        ]
