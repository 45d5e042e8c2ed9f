"""Subject schemas."""

from uuid import UUID

from pydantic import Field

from agrostudy.schemas.base import BaseSchema, OwnedRecord
from agrostudy.schemas.semesters import SemesterRead

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class SubjectBase(BaseSchema):
    """Base subject schema."""

    name: str = Field(..., min_length=1, max_length=255)
    code: str | None = Field(None, max_length=50)
    color: str = Field("#22c55e", pattern=COLOR_PATTERN)
    semester_id: UUID


class SubjectCreate(SubjectBase):
    """Schema for creating a subject."""

    pass


class SubjectRead(SubjectBase, OwnedRecord):
    """Schema for reading subject data."""


class SubjectUpdate(BaseSchema):
    """Schema for updating a subject. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    code: str | None = Field(None, max_length=50)
    color: str | None = Field(None, pattern=COLOR_PATTERN)
    semester_id: UUID | None = None


class SemesterWithSubjects(SemesterRead):
    """A semester with the loaded subjects that reference it."""

    subjects: list[SubjectRead] = Field(default_factory=list)
