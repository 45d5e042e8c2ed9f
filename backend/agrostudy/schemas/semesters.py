"""Semester schemas."""

from datetime import date

from pydantic import Field, model_validator

from agrostudy.schemas.base import BaseSchema, OwnedRecord


class SemesterBase(BaseSchema):
    """Base semester schema."""

    title: str = Field(..., min_length=1, max_length=100)
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def validate_dates(self) -> "SemesterBase":
        """Ensure end_date >= start_date."""
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class SemesterCreate(SemesterBase):
    """Schema for creating a semester."""

    pass


class SemesterRead(SemesterBase, OwnedRecord):
    """Schema for reading semester data."""


class SemesterUpdate(BaseSchema):
    """Schema for updating a semester. All fields optional."""

    title: str | None = Field(None, min_length=1, max_length=100)
    start_date: date | None = None
    end_date: date | None = None

    @model_validator(mode="after")
    def validate_dates(self) -> "SemesterUpdate":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self
