"""Semester CRUD routes."""

from uuid import UUID

from fastapi import APIRouter, status

from agrostudy.api.deps import CurriculumDep, Notifications, get_or_404, raise_for_hook
from agrostudy.schemas.semesters import SemesterCreate, SemesterRead, SemesterUpdate

router = APIRouter(prefix="/semesters", tags=["semesters"])


@router.get("/", response_model=list[SemesterRead])
async def list_semesters(curriculum: CurriculumDep) -> list[SemesterRead]:
    """List semesters, latest start date first."""
    return curriculum.semesters.items


@router.post("/", response_model=SemesterRead, status_code=status.HTTP_201_CREATED)
async def create_semester(
    data: SemesterCreate,
    curriculum: CurriculumDep,
    notifier: Notifications,
) -> SemesterRead:
    semester = await curriculum.semesters.create(data)
    if semester is None:
        raise_for_hook(curriculum.semesters, notifier)
    return semester


@router.get("/{semester_id}", response_model=SemesterRead)
async def get_semester(semester_id: UUID, curriculum: CurriculumDep) -> SemesterRead:
    return get_or_404(curriculum.semesters, semester_id)


@router.patch("/{semester_id}", response_model=SemesterRead)
async def update_semester(
    semester_id: UUID,
    data: SemesterUpdate,
    curriculum: CurriculumDep,
    notifier: Notifications,
) -> SemesterRead:
    if not await curriculum.semesters.update(semester_id, data):
        raise_for_hook(curriculum.semesters, notifier)
    return curriculum.semesters.get(semester_id)


@router.delete("/{semester_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_semester(
    semester_id: UUID,
    curriculum: CurriculumDep,
    notifier: Notifications,
) -> None:
    """Delete a semester. Rejected with 409 while any subject references it."""
    if not await curriculum.semesters.delete(semester_id):
        raise_for_hook(curriculum.semesters, notifier)
