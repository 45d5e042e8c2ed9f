"""First-run setup schemas."""

from pydantic import Field

from agrostudy.schemas.base import BaseSchema
from agrostudy.schemas.semesters import SemesterCreate, SemesterRead
from agrostudy.schemas.subjects import COLOR_PATTERN, SubjectRead


class SetupSubject(BaseSchema):
    name: str = Field("", max_length=255)  # Blank rows are skipped
    code: str | None = Field(None, max_length=50)
    color: str | None = Field(None, pattern=COLOR_PATTERN)


class SetupRequest(BaseSchema):
    semester: SemesterCreate
    subjects: list[SetupSubject] = Field(default_factory=list)


class SetupStatus(BaseSchema):
    needs_setup: bool
    predefined_subjects: list[SetupSubject]


class SetupResult(BaseSchema):
    semester: SemesterRead
    subjects: list[SubjectRead]
