"""First-run setup routes."""

from fastapi import APIRouter, status

from agrostudy.api.deps import CurrentIdentity, CurriculumDep, Gateway, Notifications, raise_for_error, raise_for_hook
from agrostudy.errors import ValidationError
from agrostudy.schemas.setup import SetupRequest, SetupResult, SetupStatus
from agrostudy.services.onboarding import PREDEFINED_SUBJECTS, complete_setup, needs_setup

router = APIRouter(prefix="/setup", tags=["setup"])


@router.get("/status", response_model=SetupStatus)
async def get_setup_status(current_identity: CurrentIdentity, gateway: Gateway) -> SetupStatus:
    """Whether the user still has to create a semester and subjects."""
    return SetupStatus(
        needs_setup=await needs_setup(gateway, current_identity.id),
        predefined_subjects=list(PREDEFINED_SUBJECTS),
    )


@router.post("/complete", response_model=SetupResult, status_code=status.HTTP_201_CREATED)
async def complete(request: SetupRequest, curriculum: CurriculumDep, notifier: Notifications) -> SetupResult:
    """Create the first semester and its subjects."""
    try:
        result = await complete_setup(curriculum, request, notifier)
    except ValidationError as e:
        raise_for_error(e)
    if result is None:
        raise_for_hook(curriculum.semesters, notifier)
    return result
