"""Pydantic schemas for the PDF library."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from agrostudy.schemas.base import BaseSchema, OwnedRecord, dedupe_tags


def split_tags(v: Any) -> list[str]:
    """Accept a comma-separated string or a list of tags."""
    if v is None:
        return []
    if isinstance(v, str):
        v = v.split(",")
    return dedupe_tags(v)


# Request schemas
class PdfUploadMetadata(BaseSchema):
    """Metadata entered alongside an uploaded PDF."""

    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    tags: list[str] = Field(default_factory=list)
    description: str | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, v: Any) -> list[str]:
        return split_tags(v)


class PdfDocumentBase(BaseSchema):
    """Base PDF document schema."""

    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)
    file_name: str = Field(..., min_length=1)
    file_path: str = Field(..., min_length=1)
    file_size: int = Field(..., ge=0)
    category: str = Field(..., min_length=1, max_length=100)
    tags: list[str] = Field(default_factory=list)
    description: str | None = None
    favorite: bool = False

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, v: Any) -> list[str]:
        return split_tags(v)


class PdfDocumentCreate(PdfDocumentBase):
    """Row inserted after the payload reached object storage."""

    pass


class PdfDocumentRead(PdfDocumentBase, OwnedRecord):
    """Full PDF document response."""


class PdfDocumentUpdate(BaseSchema):
    """Schema for updating PDF metadata. All fields optional."""

    title: str | None = Field(None, min_length=1, max_length=255)
    author: str | None = Field(None, min_length=1, max_length=255)
    category: str | None = Field(None, min_length=1, max_length=100)
    tags: list[str] | None = None
    description: str | None = None
    favorite: bool | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, v: Any) -> list[str] | None:
        return None if v is None else split_tags(v)


# Response schemas
class PdfStats(BaseModel):
    """Derived library statistics."""

    total_pdfs: int
    favorites: int
    total_size: str
    this_month: int


class PdfUrlResponse(BaseModel):
    """Public URL of a stored PDF."""

    url: str
    file_name: str
