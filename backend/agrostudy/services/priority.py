"""Event priority and its display tier."""

from datetime import datetime, timedelta

from agrostudy.schemas.events import DisplayTier, EventRead, PriorityType

DISPLAY_TIERS: dict[str, DisplayTier] = {
    "high": DisplayTier(priority="high", label="Alta", badge_variant="destructive", color="red"),
    "medium": DisplayTier(priority="medium", label="Média", badge_variant="secondary", color="yellow"),
    "low": DisplayTier(priority="low", label="Baixa", badge_variant="outline", color="green"),
}


def derive_priority(
    event_type: str,
    starts_at: datetime,
    now: datetime,
    declared: PriorityType | None = None,
) -> PriorityType:
    """
    Priority of an event.

    A declared priority always wins. Otherwise it follows how soon the
    event starts: exams within a week, assignments within three days and
    anything within a day are high; anything else within a week is
    medium. Past events count as imminent.
    """
    if declared:
        return declared
    days = (starts_at - now) / timedelta(days=1)
    if event_type == "prova" and days <= 7:
        return "high"
    if event_type == "trabalho" and days <= 3:
        return "high"
    if days <= 1:
        return "high"
    if days <= 7:
        return "medium"
    return "low"


def display_tier(priority: PriorityType) -> DisplayTier:
    return DISPLAY_TIERS[priority]


def event_tier(event: EventRead, now: datetime) -> DisplayTier:
    return display_tier(derive_priority(event.type, event.starts_at, now, event.priority))
