"""API routes package."""

from agrostudy.api.routes import (
    assistant,
    auth,
    events,
    grades,
    notes,
    pdfs,
    semesters,
    setup,
    subjects,
    visits,
)

__all__ = [
    "assistant",
    "auth",
    "events",
    "grades",
    "notes",
    "pdfs",
    "semesters",
    "setup",
    "subjects",
    "visits",
]
