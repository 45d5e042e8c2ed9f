"""Technical visit schemas."""

import datetime as dt
from typing import Any, Literal
from uuid import UUID

from pydantic import Field, field_validator

from agrostudy.schemas.base import BaseSchema, OwnedRecord, SubjectRef

VisitKindType = Literal["producao-vegetal", "zootecnia", "agronegocio", "agroecologia", "outro"]
OfflineStatusType = Literal["synced", "pending"]


class VisitPhotoRead(BaseSchema):
    """Photo attached to a visit."""

    id: UUID
    visit_id: UUID
    file_url: str
    file_path: str | None = None
    caption: str | None = None
    taken_at: dt.datetime
    exif_json: dict[str, Any] | None = None


class VisitBase(BaseSchema):
    """Base visit schema."""

    location_text: str = Field(..., min_length=1, max_length=255)
    date: dt.date
    kind: VisitKindType
    observations_md: str = ""
    subject_id: UUID | None = None
    gps: dict[str, Any] | None = None  # Opaque blob from the device

    @field_validator("observations_md", mode="before")
    @classmethod
    def ensure_text(cls, v: Any) -> str:
        return v or ""


class VisitCreate(VisitBase):
    """Schema for creating a visit. Sync status is stamped by the hook."""

    pass


class VisitRead(VisitBase, OwnedRecord):
    """Schema for reading visit data, with subject and photos resolved inline."""

    offline_status: OfflineStatusType = "synced"
    subject: SubjectRef | None = None
    photos: list[VisitPhotoRead] = Field(default_factory=list)

    @field_validator("photos", mode="before")
    @classmethod
    def ensure_photos(cls, v: Any) -> list:
        return v or []


class VisitUpdate(BaseSchema):
    """Schema for updating a visit. All fields optional."""

    location_text: str | None = Field(None, min_length=1, max_length=255)
    date: dt.date | None = None
    kind: VisitKindType | None = None
    observations_md: str | None = None
    subject_id: UUID | None = None
    gps: dict[str, Any] | None = None


class VisitStats(BaseSchema):
    """Derived visit statistics."""

    total: int
    completed: int
    scheduled: int
    total_photos: int
    by_kind: dict[str, int]
