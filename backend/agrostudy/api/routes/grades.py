"""Grade tracker routes. Nothing is stored; the summary is computed per request."""

from fastapi import APIRouter

from agrostudy.api.deps import CurrentIdentity
from agrostudy.schemas.grades import GradeSummary, GradeSummaryRequest
from agrostudy.services.grades import summarize

router = APIRouter(prefix="/grades", tags=["grades"])


@router.post("/summary", response_model=GradeSummary)
async def grade_summary(request: GradeSummaryRequest, current_identity: CurrentIdentity) -> GradeSummary:
    """Per-subject weighted averages, statuses and overall approval rate."""
    return summarize(request.entries)
