"""Study assistant routes: chat and practice exams."""

from fastapi import APIRouter

from agrostudy.api.deps import EventsDep, NotesDep, PdfsDep, Suggestions, raise_for_error
from agrostudy.errors import ValidationError
from agrostudy.schemas.assistant import AskRequest, AskResponse, ExamAnswers, ExamRequest, ExamResult, PracticeExam
from agrostudy.services.practice_exam import generate_exam, score_exam
from agrostudy.services.suggestions import build_context

router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.post("/ask", response_model=AskResponse)
async def ask(
    request: AskRequest,
    suggestions: Suggestions,
    notes: NotesDep,
    events: EventsDep,
    pdfs: PdfsDep,
) -> AskResponse:
    """
    Ask the assistant a question.

    With include_materials, the user's notes, agenda and library are
    summarized into the context.
    """
    context_parts = [request.context] if request.context else []
    if request.include_materials:
        context_parts.append(build_context(notes.items, events.items, pdfs.items))
    reply = await suggestions.ask(request.prompt, "\n\n".join(part for part in context_parts if part))
    return AskResponse(reply=reply)


@router.post("/exams", response_model=PracticeExam)
async def create_exam(request: ExamRequest, pdfs: PdfsDep) -> PracticeExam:
    """Generate a practice exam from selected PDFs of the library."""
    selected = [pdf for pdf_id in request.pdf_ids if (pdf := pdfs.get(pdf_id)) is not None]
    try:
        return generate_exam(selected)
    except ValidationError as e:
        raise_for_error(e)


@router.post("/exams/score", response_model=ExamResult)
async def score(answers: ExamAnswers) -> ExamResult:
    return score_exam(answers.answers)
