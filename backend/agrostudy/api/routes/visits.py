"""Technical visit routes."""

from uuid import UUID

from fastapi import APIRouter, File, Form, UploadFile, status

from agrostudy.api.deps import Notifications, VisitsDep, get_or_404, raise_for_hook
from agrostudy.schemas.visits import VisitCreate, VisitPhotoRead, VisitRead, VisitStats, VisitUpdate

router = APIRouter(prefix="/visits", tags=["visits"])


@router.get("/", response_model=list[VisitRead])
async def list_visits(hook: VisitsDep, kind: str | None = None) -> list[VisitRead]:
    """List visits, most recent date first, with subject and photos."""
    if kind:
        return [v for v in hook.items if v.kind == kind]
    return hook.items


@router.get("/stats", response_model=VisitStats)
async def get_visit_stats(hook: VisitsDep) -> VisitStats:
    return hook.stats()


@router.post("/", response_model=VisitRead, status_code=status.HTTP_201_CREATED)
async def create_visit(data: VisitCreate, hook: VisitsDep, notifier: Notifications) -> VisitRead:
    visit = await hook.create(data)
    if visit is None:
        raise_for_hook(hook, notifier)
    return visit


@router.get("/{visit_id}", response_model=VisitRead)
async def get_visit(visit_id: UUID, hook: VisitsDep) -> VisitRead:
    return get_or_404(hook, visit_id)


@router.patch("/{visit_id}", response_model=VisitRead)
async def update_visit(visit_id: UUID, data: VisitUpdate, hook: VisitsDep, notifier: Notifications) -> VisitRead:
    if not await hook.update(visit_id, data):
        raise_for_hook(hook, notifier)
    return hook.get(visit_id)


@router.delete("/{visit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_visit(visit_id: UUID, hook: VisitsDep, notifier: Notifications) -> None:
    """Delete a visit; its photos go with it."""
    if not await hook.delete(visit_id):
        raise_for_hook(hook, notifier)


@router.post("/{visit_id}/photos", response_model=VisitPhotoRead, status_code=status.HTTP_201_CREATED)
async def add_visit_photo(
    visit_id: UUID,
    hook: VisitsDep,
    notifier: Notifications,
    file: UploadFile = File(...),
    caption: str | None = Form(None),
) -> VisitPhotoRead:
    """Upload a photo (multipart) and attach it to the visit."""
    data = await file.read()
    photo = await hook.add_photo(
        visit_id,
        data,
        file.filename or "",
        caption=caption,
        content_type=file.content_type or "image/jpeg",
    )
    if photo is None:
        raise_for_hook(hook, notifier)
    return photo
