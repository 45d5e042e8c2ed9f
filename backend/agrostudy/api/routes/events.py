"""Academic agenda routes."""

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, status

from agrostudy.api.deps import EventsDep, Notifications, get_or_404, raise_for_hook
from agrostudy.hooks import EventsHook
from agrostudy.schemas.events import EventCreate, EventRead, EventStats, EventUpdate, EventWithTier

router = APIRouter(prefix="/events", tags=["events"])


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _with_tier(hook: EventsHook, event: EventRead) -> EventWithTier:
    return EventWithTier(**event.model_dump(), tier=hook.tier(event))


@router.get("/", response_model=list[EventWithTier])
async def list_events(
    hook: EventsDep,
    start: datetime | None = None,
    end: datetime | None = None,
    type: str | None = None,
) -> list[EventWithTier]:
    """
    List events, soonest first, each with its priority tier.

    Filters:
    - start/end: Events starting in [start, end)
    - type: prova, trabalho, aula or outro
    """
    events = hook.items
    if start:
        events = [e for e in events if e.starts_at >= _aware(start)]
    if end:
        events = [e for e in events if e.starts_at < _aware(end)]
    if type:
        events = [e for e in events if e.type == type]
    return [_with_tier(hook, e) for e in events]


@router.get("/stats", response_model=EventStats)
async def get_event_stats(hook: EventsDep) -> EventStats:
    """Events this week and counts per type."""
    return hook.stats()


@router.post("/", response_model=EventWithTier, status_code=status.HTTP_201_CREATED)
async def create_event(data: EventCreate, hook: EventsDep, notifier: Notifications) -> EventWithTier:
    event = await hook.create(data)
    if event is None:
        raise_for_hook(hook, notifier)
    return _with_tier(hook, event)


@router.get("/{event_id}", response_model=EventWithTier)
async def get_event(event_id: UUID, hook: EventsDep) -> EventWithTier:
    return _with_tier(hook, get_or_404(hook, event_id))


@router.patch("/{event_id}", response_model=EventWithTier)
async def update_event(event_id: UUID, data: EventUpdate, hook: EventsDep, notifier: Notifications) -> EventWithTier:
    if not await hook.update(event_id, data):
        raise_for_hook(hook, notifier)
    return _with_tier(hook, hook.get(event_id))


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(event_id: UUID, hook: EventsDep, notifier: Notifications) -> None:
    if not await hook.delete(event_id):
        raise_for_hook(hook, notifier)
