"""Grade tracker schemas. Grades are computed on request and never persisted."""

from datetime import date
from typing import Literal

from pydantic import Field

from agrostudy.schemas.base import BaseSchema

AssessmentType = Literal["Prova", "Trabalho", "Seminário", "Projeto", "Participação", "Outro"]
GradeStatus = Literal["Aprovado", "Pendente", "Reprovado"]


class GradeEntry(BaseSchema):
    """One assessment result."""

    subject: str = Field(..., min_length=1, max_length=255)
    assessment_type: AssessmentType = "Prova"
    description: str = Field(..., min_length=1, max_length=255)
    grade: float = Field(..., ge=0, le=10)
    weight: float = Field(1.0, gt=0)
    date: date
    observations: str | None = None


class GradedEntry(GradeEntry):
    status: GradeStatus


class SubjectGrades(BaseSchema):
    """Weighted result of every assessment of one subject."""

    name: str
    entries: list[GradedEntry]
    average: float
    status: GradeStatus
    total_assessments: int


class GradeSummaryRequest(BaseSchema):
    entries: list[GradeEntry] = Field(default_factory=list)


class GradeSummary(BaseSchema):
    total_entries: int
    total_subjects: int
    overall_average: float
    approved_subjects: int
    approval_percentage: int
    subjects: list[SubjectGrades]
