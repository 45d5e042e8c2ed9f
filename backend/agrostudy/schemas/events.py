"""Agenda event schemas."""

from datetime import datetime, timezone
from typing import Any, Literal
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from agrostudy.schemas.base import BaseSchema, OwnedRecord, SubjectRef

# Type aliases for enums (used as literals for validation)
EventTypeType = Literal["prova", "trabalho", "aula", "outro"]
PriorityType = Literal["high", "medium", "low"]
EventSourceType = Literal["manual", "imported"]

DEFAULT_REMINDERS = [15, 60]


def ensure_utc(v: datetime | None) -> datetime | None:
    """Naive timestamps are taken as UTC."""
    if v is not None and v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


class EventBase(BaseSchema):
    """Base event schema."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    starts_at: datetime
    ends_at: datetime | None = None
    type: EventTypeType = "outro"
    location: str | None = Field(None, max_length=255)
    subject_id: UUID | None = None
    priority: PriorityType | None = None
    reminders_min_before: list[int] = Field(default_factory=lambda: list(DEFAULT_REMINDERS))

    normalize_tz = field_validator("starts_at", "ends_at")(ensure_utc)

    @field_validator("reminders_min_before", mode="before")
    @classmethod
    def default_reminders(cls, v: Any) -> list[int]:
        if not v:
            return list(DEFAULT_REMINDERS)
        return v

    @field_validator("reminders_min_before")
    @classmethod
    def validate_reminders(cls, v: list[int]) -> list[int]:
        if any(minutes < 0 for minutes in v):
            raise ValueError("reminder lead times must be non-negative")
        return v

    @model_validator(mode="after")
    def validate_time_range(self) -> "EventBase":
        """Ensure ends_at >= starts_at if set."""
        if self.ends_at is not None and self.ends_at < self.starts_at:
            raise ValueError("ends_at must be on or after starts_at")
        return self


class EventCreate(EventBase):
    """Schema for creating an event. Source is stamped by the hook."""

    pass


class EventRead(EventBase, OwnedRecord):
    """Schema for reading event data, with its subject resolved inline."""

    source: EventSourceType = "manual"
    subject: SubjectRef | None = None


class EventUpdate(BaseSchema):
    """Schema for updating an event. All fields optional."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    type: EventTypeType | None = None
    location: str | None = Field(None, max_length=255)
    subject_id: UUID | None = None
    priority: PriorityType | None = None
    reminders_min_before: list[int] | None = None

    normalize_tz = field_validator("starts_at", "ends_at")(ensure_utc)


class EventStats(BaseSchema):
    """Derived agenda statistics."""

    this_week: int
    exams: int
    assignments: int
    classes: int


class DisplayTier(BaseSchema):
    """Presentation tier for an event priority."""

    priority: PriorityType
    label: str
    badge_variant: str
    color: str


class EventWithTier(EventRead):
    """Event as listed on the agenda, with its effective priority tier."""

    tier: DisplayTier
