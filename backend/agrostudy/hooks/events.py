"""Academic agenda hook."""

from datetime import datetime, timezone

from agrostudy.config import get_settings
from agrostudy.gateway.base import EVENTS, SUBJECT_JOIN, OrderBy
from agrostudy.hooks.resource import ResourceConfig, ResourceHook, crud_messages
from agrostudy.schemas.events import DisplayTier, EventCreate, EventRead, EventStats, EventUpdate
from agrostudy.services.priority import event_tier
from agrostudy.services.stats import event_stats

EVENT_CONFIG = ResourceConfig(
    entity="event",
    collection=EVENTS,
    read_schema=EventRead,
    create_schema=EventCreate,
    update_schema=EventUpdate,
    order_by=(OrderBy("starts_at"),),
    joins=(SUBJECT_JOIN,),
    messages=crud_messages("evento", "eventos", article="o"),
    stamp={"source": "manual"},
)


class EventsHook(ResourceHook[EventRead]):
    """Agenda events of the current identity, soonest first."""

    config = EVENT_CONFIG

    def stats(self, now: datetime | None = None) -> EventStats:
        now = now or datetime.now(timezone.utc)
        return event_stats(self.items, now, get_settings().week_starts_on)

    def tier(self, event: EventRead, now: datetime | None = None) -> DisplayTier:
        return event_tier(event, now or datetime.now(timezone.utc))

    def upcoming(self, now: datetime | None = None, limit: int | None = None) -> list[EventRead]:
        now = now or datetime.now(timezone.utc)
        events = [event for event in self.items if event.starts_at >= now]
        return events[:limit] if limit is not None else events
