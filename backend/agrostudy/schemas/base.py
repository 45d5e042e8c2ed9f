"""Base schema configuration."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,  # Enable ORM mode
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class TimestampMixin(BaseModel):
    """Mixin for created_at/updated_at timestamps."""

    created_at: datetime
    updated_at: datetime


class IDMixin(BaseModel):
    """Mixin for UUID primary key."""

    id: UUID


class OwnedRecord(BaseSchema, IDMixin, TimestampMixin):
    """Row as returned by the gateway: id, owner and timestamps. Unknown columns are ignored."""

    user_id: UUID


class SubjectRef(BaseSchema):
    """Subject resolved inline on notes, events and visits."""

    id: UUID
    name: str
    color: str


def dedupe_tags(tags: Any) -> list[str]:
    """
    Collapse duplicate and blank tags, keeping first occurrence order.

    Runs as a "before" validator, so the raw input is type-checked here:
    anything but a list or tuple of strings raises ValueError.
    """
    if tags is None:
        return []
    if not isinstance(tags, (list, tuple)):
        raise ValueError("tags must be a list of strings")
    seen: set[str] = set()
    result = []
    for tag in tags:
        if not isinstance(tag, str):
            raise ValueError("tags must be a list of strings")
        tag = tag.strip()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result
