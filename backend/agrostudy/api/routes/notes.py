"""Notes CRUD routes."""

from uuid import UUID

from fastapi import APIRouter, status

from agrostudy.api.deps import Notifications, NotesDep, get_or_404, raise_for_hook
from agrostudy.schemas.notes import NoteCreate, NoteRead, NoteUpdate

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("/", response_model=list[NoteRead])
async def list_notes(
    hook: NotesDep,
    subject_id: UUID | None = None,
    tag: str | None = None,
    q: str | None = None,
) -> list[NoteRead]:
    """
    List notes for the current user, newest first.

    Filters:
    - subject_id: Filter by subject
    - tag: Notes carrying this tag
    - q: Search in title, content and tags
    """
    notes = hook.search(q) if q else hook.items
    if subject_id:
        notes = [n for n in notes if n.subject_id == subject_id]
    if tag:
        notes = [n for n in notes if tag in n.tags]
    return notes


@router.post("/", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def create_note(data: NoteCreate, hook: NotesDep, notifier: Notifications) -> NoteRead:
    note = await hook.create(data)
    if note is None:
        raise_for_hook(hook, notifier)
    return note


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(note_id: UUID, hook: NotesDep) -> NoteRead:
    """Get a specific note by ID."""
    return get_or_404(hook, note_id)


@router.patch("/{note_id}", response_model=NoteRead)
async def update_note(note_id: UUID, data: NoteUpdate, hook: NotesDep, notifier: Notifications) -> NoteRead:
    """Update a note."""
    if not await hook.update(note_id, data):
        raise_for_hook(hook, notifier)
    return hook.get(note_id)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(note_id: UUID, hook: NotesDep, notifier: Notifications) -> None:
    if not await hook.delete(note_id):
        raise_for_hook(hook, notifier)
