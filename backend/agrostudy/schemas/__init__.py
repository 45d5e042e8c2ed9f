"""Pydantic schemas for validation at the gateway boundary and the API."""

from agrostudy.schemas.auth import Identity, SignInRequest, SignUpRequest, TokenResponse
from agrostudy.schemas.semesters import SemesterCreate, SemesterRead, SemesterUpdate
from agrostudy.schemas.subjects import SemesterWithSubjects, SubjectCreate, SubjectRead, SubjectUpdate
from agrostudy.schemas.notes import NoteAttachment, NoteCreate, NoteRead, NoteUpdate
from agrostudy.schemas.events import EventCreate, EventRead, EventStats, EventUpdate, EventWithTier
from agrostudy.schemas.visits import VisitCreate, VisitPhotoRead, VisitRead, VisitStats, VisitUpdate
from agrostudy.schemas.pdfs import (
    PdfDocumentCreate,
    PdfDocumentRead,
    PdfDocumentUpdate,
    PdfStats,
    PdfUploadMetadata,
)

__all__ = [
    # Auth
    "Identity",
    "SignInRequest",
    "SignUpRequest",
    "TokenResponse",
    # Curriculum
    "SemesterCreate",
    "SemesterRead",
    "SemesterUpdate",
    "SemesterWithSubjects",
    "SubjectCreate",
    "SubjectRead",
    "SubjectUpdate",
    # Notes
    "NoteAttachment",
    "NoteCreate",
    "NoteRead",
    "NoteUpdate",
    # Events
    "EventCreate",
    "EventRead",
    "EventStats",
    "EventUpdate",
    "EventWithTier",
    # Visits
    "VisitCreate",
    "VisitPhotoRead",
    "VisitRead",
    "VisitStats",
    "VisitUpdate",
    # PDF library
    "PdfDocumentCreate",
    "PdfDocumentRead",
    "PdfDocumentUpdate",
    "PdfStats",
    "PdfUploadMetadata",
]
