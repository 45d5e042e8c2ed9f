"""Assistant chat and practice exam schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field

from agrostudy.schemas.base import BaseSchema

DifficultyType = Literal["Fácil", "Médio", "Difícil"]


class AskRequest(BaseSchema):
    """A question for the study assistant."""

    prompt: str = Field(..., min_length=1, max_length=10000)
    context: str | None = None
    include_materials: bool = False  # Add the user's notes, agenda and library to the context


class AskResponse(BaseSchema):
    reply: str


class ExamQuestion(BaseSchema):
    """Question as sent to the client."""

    id: str
    question: str
    options: list[str]
    difficulty: DifficultyType
    topic: str


class BankQuestion(ExamQuestion):
    """Question with its answer key. Only used server-side for scoring."""

    correct_answer: int = Field(..., ge=0)


class ExamRequest(BaseSchema):
    pdf_ids: list[UUID] = Field(default_factory=list)


class PracticeExam(BaseSchema):
    id: str
    title: str
    subject: str
    questions: list[ExamQuestion]
    duration_minutes: int
    generated_at: datetime
    total_questions: int


class ExamAnswers(BaseSchema):
    """Chosen option index per question id."""

    answers: dict[str, int] = Field(default_factory=dict)


class ExamResult(BaseSchema):
    score: int
    correct: int
    total: int
