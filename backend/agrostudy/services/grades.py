"""Grade tracker calculations."""

import math
from collections.abc import Iterable

from agrostudy.schemas.grades import GradedEntry, GradeEntry, GradeStatus, GradeSummary, SubjectGrades

APPROVED_THRESHOLD = 7.0
PENDING_THRESHOLD = 5.0


def grade_status(value: float) -> GradeStatus:
    if value >= APPROVED_THRESHOLD:
        return "Aprovado"
    if value >= PENDING_THRESHOLD:
        return "Pendente"
    return "Reprovado"


def weighted_average(entries: Iterable[GradeEntry]) -> float:
    entries = list(entries)
    total_weight = sum(entry.weight for entry in entries)
    if total_weight <= 0:
        return 0.0
    return round(sum(entry.grade * entry.weight for entry in entries) / total_weight, 2)


def subject_grades(entries: Iterable[GradeEntry]) -> list[SubjectGrades]:
    """Group entries by subject, keeping the order in which subjects first appear."""
    grouped: dict[str, list[GradeEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.subject, []).append(entry)

    result = []
    for name, group in grouped.items():
        average = weighted_average(group)
        result.append(
            SubjectGrades(
                name=name,
                entries=[GradedEntry(**entry.model_dump(), status=grade_status(entry.grade)) for entry in group],
                average=average,
                status=grade_status(average),
                total_assessments=len(group),
            )
        )
    return result


def summarize(entries: Iterable[GradeEntry]) -> GradeSummary:
    entries = list(entries)
    subjects = subject_grades(entries)
    approved = sum(1 for subject in subjects if subject.status == "Aprovado")
    overall = round(sum(s.average for s in subjects) / len(subjects), 2) if subjects else 0.0
    # Half-up, the way percentages are shown to students
    percentage = math.floor(approved / len(subjects) * 100 + 0.5) if subjects else 0
    return GradeSummary(
        total_entries=len(entries),
        total_subjects=len(subjects),
        overall_average=overall,
        approved_subjects=approved,
        approval_percentage=percentage,
        subjects=subjects,
    )
