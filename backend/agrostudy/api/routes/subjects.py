"""Subject CRUD routes."""

from uuid import UUID

from fastapi import APIRouter, status

from agrostudy.api.deps import CurriculumDep, Notifications, get_or_404, raise_for_hook
from agrostudy.schemas.subjects import SemesterWithSubjects, SubjectCreate, SubjectRead, SubjectUpdate

router = APIRouter(prefix="/subjects", tags=["subjects"])


@router.get("/", response_model=list[SubjectRead])
async def list_subjects(curriculum: CurriculumDep, semester_id: UUID | None = None) -> list[SubjectRead]:
    """List subjects by name, optionally for one semester."""
    if semester_id:
        return curriculum.subjects.for_semester(semester_id)
    return curriculum.subjects.items


@router.get("/by-semester", response_model=list[SemesterWithSubjects])
async def list_subjects_by_semester(curriculum: CurriculumDep) -> list[SemesterWithSubjects]:
    return curriculum.subjects_by_semester()


@router.post("/", response_model=SubjectRead, status_code=status.HTTP_201_CREATED)
async def create_subject(
    data: SubjectCreate,
    curriculum: CurriculumDep,
    notifier: Notifications,
) -> SubjectRead:
    """Create a subject in one of the current user's semesters."""
    subject = await curriculum.subjects.create(data)
    if subject is None:
        raise_for_hook(curriculum.subjects, notifier)
    return subject


@router.get("/{subject_id}", response_model=SubjectRead)
async def get_subject(subject_id: UUID, curriculum: CurriculumDep) -> SubjectRead:
    return get_or_404(curriculum.subjects, subject_id)


@router.patch("/{subject_id}", response_model=SubjectRead)
async def update_subject(
    subject_id: UUID,
    data: SubjectUpdate,
    curriculum: CurriculumDep,
    notifier: Notifications,
) -> SubjectRead:
    if not await curriculum.subjects.update(subject_id, data):
        raise_for_hook(curriculum.subjects, notifier)
    return curriculum.subjects.get(subject_id)


@router.delete("/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subject(
    subject_id: UUID,
    curriculum: CurriculumDep,
    notifier: Notifications,
) -> None:
    if not await curriculum.subjects.delete(subject_id):
        raise_for_hook(curriculum.subjects, notifier)
