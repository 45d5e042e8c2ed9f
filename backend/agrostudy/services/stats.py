"""
Derived statistics over loaded collections.

Pure functions: every time-dependent computation takes an explicit
``now``/``today`` so results are reproducible. ``now`` must carry the same
timezone awareness as the stored timestamps (the gateways return UTC-aware
datetimes).
"""

from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from agrostudy.schemas.events import EventRead, EventStats
from agrostudy.schemas.pdfs import PdfDocumentRead, PdfStats
from agrostudy.schemas.visits import VisitRead, VisitStats

MB = 1024 * 1024


def week_start(now: datetime, starts_on: str = "sunday") -> datetime:
    """Midnight of the first day of the week containing ``now``."""
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    # datetime.weekday(): Monday == 0
    offset = (now.weekday() + 1) % 7 if starts_on == "sunday" else now.weekday()
    return midnight - timedelta(days=offset)


def week_window(now: datetime, starts_on: str = "sunday") -> tuple[datetime, datetime]:
    """Half-open window [week start, week start + 7 days)."""
    start = week_start(now, starts_on)
    return start, start + timedelta(days=7)


def event_stats(events: Iterable[EventRead], now: datetime, week_starts_on: str = "sunday") -> EventStats:
    events = list(events)
    start, end = week_window(now, week_starts_on)
    by_type = Counter(event.type for event in events)
    return EventStats(
        this_week=sum(1 for event in events if start <= event.starts_at < end),
        exams=by_type["prova"],
        assignments=by_type["trabalho"],
        classes=by_type["aula"],
    )


def visit_stats(visits: Iterable[VisitRead], today: date) -> VisitStats:
    visits = list(visits)
    return VisitStats(
        total=len(visits),
        completed=sum(1 for visit in visits if visit.date <= today),
        scheduled=sum(1 for visit in visits if visit.date > today),
        total_photos=sum(len(visit.photos) for visit in visits),
        by_kind=dict(Counter(visit.kind for visit in visits)),
    )


def format_file_size(total_bytes: int) -> str:
    """
    Human readable size of the library.

    >>> format_file_size(0)
    '0 MB'
    >>> format_file_size(5 * 1024 * 1024)
    '5.0 MB'
    >>> format_file_size(1105 * 1024 * 1024)
    '1.1 GB'
    """
    if total_bytes <= 0:
        return "0 MB"
    megabytes = total_bytes / MB
    if megabytes >= 1024:
        return f"{megabytes / 1024:.1f} GB"
    return f"{megabytes:.1f} MB"


def pdf_stats(pdfs: Iterable[PdfDocumentRead], now: datetime) -> PdfStats:
    pdfs = list(pdfs)
    return PdfStats(
        total_pdfs=len(pdfs),
        favorites=sum(1 for pdf in pdfs if pdf.favorite),
        total_size=format_file_size(sum(pdf.file_size for pdf in pdfs)),
        this_month=sum(
            1
            for pdf in pdfs
            if pdf.created_at.year == now.year and pdf.created_at.month == now.month
        ),
    )
