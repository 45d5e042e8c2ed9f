"""Note schemas."""

from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from agrostudy.schemas.base import BaseSchema, OwnedRecord, SubjectRef, dedupe_tags


class NoteBase(BaseSchema):
    """Base note schema."""

    title: str = Field(..., min_length=1, max_length=255)
    content_md: str = ""  # Markdown content
    subject_id: UUID | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("content_md", mode="before")
    @classmethod
    def ensure_text(cls, v: Any) -> str:
        return v or ""

    @field_validator("tags", mode="before")
    @classmethod
    def ensure_tag_set(cls, v: Any) -> list[str]:
        """Tags are logically a set. A single tag may be given as a bare string."""
        return dedupe_tags([v] if isinstance(v, str) else v)


class NoteCreate(NoteBase):
    """Schema for creating a note."""

    pass


class NoteRead(NoteBase, OwnedRecord):
    """Schema for reading note data, with its subject resolved inline."""

    subject: SubjectRef | None = None


class NoteUpdate(BaseSchema):
    """Schema for updating a note. All fields optional."""

    title: str | None = Field(None, min_length=1, max_length=255)
    content_md: str | None = None
    subject_id: UUID | None = None
    tags: list[str] | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def ensure_tag_set(cls, v: Any) -> list[str] | None:
        if v is None:
            return None
        return dedupe_tags([v] if isinstance(v, str) else v)


class NoteAttachment(BaseSchema):
    """
    File picked alongside a note.

    Held only in hook memory: bytes are never uploaded and are dropped
    when the hook resets.
    """

    file_name: str
    file_type: str = "application/octet-stream"
    file_size: int = Field(0, ge=0)
