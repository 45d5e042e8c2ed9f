"""Owner-scoped resource hooks, one per entity type."""

from agrostudy.hooks.curriculum import Curriculum, SemestersHook, SubjectsHook
from agrostudy.hooks.events import EventsHook
from agrostudy.hooks.notes import NotesHook
from agrostudy.hooks.pdfs import PdfLibraryHook
from agrostudy.hooks.resource import HookPhase, ResourceHook
from agrostudy.hooks.visits import VisitsHook

__all__ = [
    "Curriculum",
    "EventsHook",
    "HookPhase",
    "NotesHook",
    "PdfLibraryHook",
    "ResourceHook",
    "SemestersHook",
    "SubjectsHook",
    "VisitsHook",
]
