"""
SQLAlchemy 2.0 Models for AgroStudy.

Uses modern declarative syntax with Mapped[] type annotations.
Every domain table carries user_id; the gateway scopes all queries by it.
Table and column names match the row keys the hooks exchange with the gateway.
"""

import datetime as dt
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    ARRAY,
    BigInteger,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import CITEXT, JSONB, TIMESTAMP, UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agrostudy.db.base import Base


class User(Base):
    """Account that owns every other row."""

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), primary_key=True, default=uuid4
    )
    email: Mapped[str] = mapped_column(CITEXT(), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )


class Semester(Base):
    """Academic term grouping subjects."""

    __tablename__ = "semesters"
    __table_args__ = (
        Index("idx_semesters_user_start", "user_id", "start_date"),
        CheckConstraint("end_date >= start_date", name="valid_semester_range"),
    )

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), primary_key=True, default=uuid4
    )
    user_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)  # e.g., "2024.1"
    start_date: Mapped[dt.date] = mapped_column(nullable=False)
    end_date: Mapped[dt.date] = mapped_column(nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )

    subjects: Mapped[list["Subject"]] = relationship("Subject", back_populates="semester")


class Subject(Base):
    """Course taken during a semester."""

    __tablename__ = "subjects"
    __table_args__ = (
        Index("idx_subjects_user_name", "user_id", "name"),
        CheckConstraint("color ~* '^#[0-9A-Fa-f]{6}$'", name="valid_color"),
    )

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), primary_key=True, default=uuid4
    )
    user_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    # RESTRICT: a semester with subjects cannot be deleted
    semester_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("semesters.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)  # e.g., "SOL101"
    color: Mapped[str] = mapped_column(String(7), nullable=False)  # Hex color
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )

    semester: Mapped["Semester"] = relationship("Semester", back_populates="subjects")


class Note(Base):
    """
    Notebook entry with markdown content.

    Uses TEXT[] for tags (simpler than JSONB for flat string arrays).
    """

    __tablename__ = "notes"
    __table_args__ = (
        Index("idx_notes_user_created_at", "user_id", "created_at"),
        Index("idx_notes_tags", "tags", postgresql_using="gin"),
    )

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), primary_key=True, default=uuid4
    )
    user_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    subject_id: Mapped[Optional[UUID]] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content_md: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )


class Event(Base):
    """Agenda entry: exam, assignment, class or other."""

    __tablename__ = "events"
    __table_args__ = (
        Index("idx_events_user_starts_at", "user_id", "starts_at"),
        CheckConstraint(
            "ends_at IS NULL OR ends_at >= starts_at",
            name="valid_event_range",
        ),
        CheckConstraint(
            "priority IS NULL OR priority IN ('high', 'medium', 'low')",
            name="valid_priority",
        ),
    )

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), primary_key=True, default=uuid4
    )
    user_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    subject_id: Mapped[Optional[UUID]] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    starts_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    ends_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="outro")
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    priority: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    reminders_min_before: Mapped[list[int]] = mapped_column(
        ARRAY(Integer), nullable=False, server_default="{15,60}"
    )
    source: Mapped[str] = mapped_column(String(20), nullable=False, server_default="manual")
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )


class Visit(Base):
    """Technical field visit journal entry."""

    __tablename__ = "visits"
    __table_args__ = (Index("idx_visits_user_date", "user_id", "date"),)

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), primary_key=True, default=uuid4
    )
    user_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    subject_id: Mapped[Optional[UUID]] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("subjects.id", ondelete="SET NULL"), nullable=True, index=True
    )
    location_text: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[dt.date] = mapped_column(nullable=False)
    kind: Mapped[str] = mapped_column(String(50), nullable=False)
    observations_md: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    gps: Mapped[Optional[dict]] = mapped_column(JSONB, nullable=True)
    offline_status: Mapped[str] = mapped_column(String(20), nullable=False, server_default="synced")
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )

    photos: Mapped[list["VisitPhoto"]] = relationship(
        "VisitPhoto", back_populates="visit", cascade="all, delete-orphan", passive_deletes=True
    )


class VisitPhoto(Base):
    """Photo taken during a visit. Deleted with its visit."""

    __tablename__ = "visit_photos"

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), primary_key=True, default=uuid4
    )
    user_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    visit_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("visits.id", ondelete="CASCADE"), nullable=False, index=True
    )
    file_url: Mapped[str] = mapped_column(String(), nullable=False)
    file_path: Mapped[Optional[str]] = mapped_column(String(), nullable=True)
    caption: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    taken_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )
    exif_json: Mapped[Optional[dict]] = mapped_column(JSONB, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )

    visit: Mapped["Visit"] = relationship("Visit", back_populates="photos")


class PdfDocument(Base):
    """
    PDF metadata.

    The payload lives in object storage under file_path.
    """

    __tablename__ = "pdf_library"
    __table_args__ = (
        Index("idx_pdf_library_user_created_at", "user_id", "created_at"),
        Index("idx_pdf_library_file_path", "file_path", unique=True),
    )

    id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), primary_key=True, default=uuid4
    )
    user_id: Mapped[UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    file_name: Mapped[str] = mapped_column(String(), nullable=False)
    file_path: Mapped[str] = mapped_column(String(), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    tags: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=text("NOW()"), nullable=False
    )


# Gateway collection name -> model
MODELS_BY_COLLECTION: dict[str, type[Base]] = {
    "semesters": Semester,
    "subjects": Subject,
    "notes": Note,
    "events": Event,
    "visits": Visit,
    "visit_photos": VisitPhoto,
    "pdf_library": PdfDocument,
}
