"""First-run setup: one semester and its subjects."""

import logging
from uuid import UUID

from agrostudy.errors import ValidationError
from agrostudy.gateway.base import SUBJECTS, RemoteDataGateway
from agrostudy.hooks.curriculum import Curriculum
from agrostudy.notifications import Notification, Notifier
from agrostudy.schemas.setup import SetupRequest, SetupResult, SetupSubject

logger = logging.getLogger(__name__)

PREDEFINED_SUBJECTS: tuple[SetupSubject, ...] = (
    SetupSubject(name="Agronomia", code="AGR101", color="#22c55e"),
    SetupSubject(name="Zootecnia", code="ZOO101", color="#3b82f6"),
    SetupSubject(name="Engenharia Florestal", code="ENG101", color="#10b981"),
    SetupSubject(name="Biotecnologia", code="BIO101", color="#8b5cf6"),
    SetupSubject(name="Solos", code="SOL101", color="#f59e0b"),
    SetupSubject(name="Fitotecnia", code="FIT101", color="#ef4444"),
    SetupSubject(name="Entomologia", code="ENT101", color="#06b6d4"),
    SetupSubject(name="Fitopatologia", code="FIP101", color="#84cc16"),
    SetupSubject(name="Economia Rural", code="ECO101", color="#f97316"),
    SetupSubject(name="Extensão Rural", code="EXT101", color="#a855f7"),
)

SUBJECT_COLORS = tuple(subject.color for subject in PREDEFINED_SUBJECTS)

NO_SUBJECTS = "Você precisa de pelo menos uma disciplina para continuar"


async def needs_setup(gateway: RemoteDataGateway, owner_id: UUID) -> bool:
    """True while the identity owns no subject."""
    subjects = await gateway.fetch_all(SUBJECTS, owner_id)
    return not subjects


async def complete_setup(curriculum: Curriculum, request: SetupRequest, notifier: Notifier) -> SetupResult | None:
    """
    Create the semester, then each named subject in order.

    Raises ValidationError when no subject has a name. Returns None when
    the semester could not be created; the semesters hook holds the error.
    Subjects that fail are skipped and reported by the subjects hook.
    """
    named = [subject for subject in request.subjects if subject.name.strip()]
    if not named:
        notifier.notify(
            Notification(
                "error",
                "Adicione pelo menos uma disciplina",
                NO_SUBJECTS,
                ValidationError(NO_SUBJECTS, field="subjects"),
            )
        )
        raise ValidationError(NO_SUBJECTS, field="subjects")

    semester = await curriculum.semesters.create(request.semester)
    if semester is None:
        return None

    created = []
    for index, subject in enumerate(named):
        record = await curriculum.subjects.create(
            {
                "name": subject.name,
                "code": subject.code or None,
                "color": subject.color or SUBJECT_COLORS[index % len(SUBJECT_COLORS)],
                "semester_id": semester.id,
            }
        )
        if record is not None:
            created.append(record)

    if len(created) < len(named):
        logger.warning("Setup created %d of %d subjects", len(created), len(named))
    notifier.notify(Notification("success", "Configuração concluída!", "Sua conta foi configurada com sucesso"))
    return SetupResult(semester=semester, subjects=created)
