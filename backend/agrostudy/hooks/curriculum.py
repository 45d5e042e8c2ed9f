"""
Semesters and subjects.

Both collections are loaded side by side: subjects reference semesters,
so a semester cannot be deleted while a loaded subject points at it and
a subject cannot point at a semester that is not loaded.
"""

import logging
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from agrostudy.errors import ConflictError, ValidationError
from agrostudy.gateway.base import SEMESTERS, SUBJECTS, OrderBy, RemoteDataGateway
from agrostudy.hooks.resource import HookMessages, Message, ResourceConfig, ResourceHook
from agrostudy.notifications import Notifier
from agrostudy.schemas.semesters import SemesterCreate, SemesterRead, SemesterUpdate
from agrostudy.schemas.subjects import SemesterWithSubjects, SubjectCreate, SubjectRead, SubjectUpdate
from agrostudy.session import Session

logger = logging.getLogger(__name__)

SEMESTER_HAS_SUBJECTS = (
    "Não é possível remover um semestre que possui disciplinas. Remova as disciplinas primeiro."
)
UNKNOWN_SEMESTER = "Selecione um semestre válido."

_LOAD_ERROR = Message("Erro ao carregar dados", "Não foi possível carregar disciplinas e semestres")

SEMESTER_CONFIG = ResourceConfig(
    entity="semester",
    collection=SEMESTERS,
    read_schema=SemesterRead,
    create_schema=SemesterCreate,
    update_schema=SemesterUpdate,
    order_by=(OrderBy("start_date", descending=True),),
    messages=HookMessages(
        load_error=_LOAD_ERROR,
        created=Message("Semestre criado", 'Semestre "{title}" criado com sucesso'),
        create_error=Message("Erro ao criar semestre", "Não foi possível criar o semestre"),
        updated=Message("Semestre atualizado", 'Semestre "{title}" atualizado com sucesso'),
        update_error=Message("Erro ao atualizar semestre", "Não foi possível atualizar o semestre"),
        deleted=Message("Semestre removido", "O semestre foi removido com sucesso"),
        delete_error=Message("Erro ao remover semestre", "Não foi possível remover o semestre"),
        not_found="Semestre não encontrado.",
    ),
)

SUBJECT_CONFIG = ResourceConfig(
    entity="subject",
    collection=SUBJECTS,
    read_schema=SubjectRead,
    create_schema=SubjectCreate,
    update_schema=SubjectUpdate,
    order_by=(OrderBy("name"),),
    messages=HookMessages(
        load_error=_LOAD_ERROR,
        created=Message("Disciplina criada", 'Disciplina "{name}" criada com sucesso'),
        create_error=Message("Erro ao criar disciplina", "Não foi possível criar a disciplina"),
        updated=Message("Disciplina atualizada", 'Disciplina "{name}" atualizada com sucesso'),
        update_error=Message("Erro ao atualizar disciplina", "Não foi possível atualizar a disciplina"),
        deleted=Message("Disciplina removida", "A disciplina foi removida com sucesso"),
        delete_error=Message("Erro ao remover disciplina", "Não foi possível remover a disciplina"),
        not_found="Disciplina não encontrada.",
    ),
)


class SemestersHook(ResourceHook[SemesterRead]):
    """
    Semesters of the current identity, latest start first.

    Deleting a semester that still has subjects is refused locally, which
    needs the subjects hook. Build both through Curriculum (or pass this
    hook to SubjectsHook), which links them.
    """

    config = SEMESTER_CONFIG

    def __init__(self, session: Session, gateway: RemoteDataGateway, notifier: Notifier | None = None):
        super().__init__(session, gateway, notifier)
        self.subjects: "SubjectsHook | None" = None

    async def check_delete(self, current: SemesterRead) -> None:
        if self.subjects is None:
            logger.warning("Semester %s deleted without a linked subjects hook; subject check skipped", current.id)
            return
        if any(s.semester_id == current.id for s in self.subjects.items):
            raise ConflictError(SEMESTER_HAS_SUBJECTS)


class SubjectsHook(ResourceHook[SubjectRead]):
    """Subjects of the current identity, by name."""

    config = SUBJECT_CONFIG

    def __init__(
        self,
        session: Session,
        gateway: RemoteDataGateway,
        semesters: SemestersHook,
        notifier: Notifier | None = None,
    ):
        super().__init__(session, gateway, notifier)
        self.semesters = semesters
        semesters.subjects = self

    def _require_semester(self, semester_id: UUID | None) -> None:
        if semester_id is None or self.semesters.get(semester_id) is None:
            raise ValidationError(UNKNOWN_SEMESTER, field="semester_id")

    async def check_create(self, payload: BaseModel) -> None:
        self._require_semester(payload.semester_id)

    async def check_update(self, current: SubjectRead, patch: dict[str, Any]) -> None:
        if "semester_id" in patch:
            self._require_semester(patch["semester_id"])

    def for_semester(self, semester_id: UUID) -> list[SubjectRead]:
        return [subject for subject in self.items if subject.semester_id == semester_id]


class Curriculum:
    """Semesters and subjects mounted together for one session."""

    def __init__(self, session: Session, gateway: RemoteDataGateway, notifier: Notifier | None = None):
        self.semesters = SemestersHook(session, gateway, notifier)
        self.subjects = SubjectsHook(session, gateway, self.semesters, notifier)

    @property
    def loading(self) -> bool:
        return self.semesters.loading or self.subjects.loading

    async def mount(self) -> "Curriculum":
        await self.semesters.mount()
        await self.subjects.mount()
        return self

    def unmount(self) -> None:
        self.subjects.unmount()
        self.semesters.unmount()

    async def refresh(self) -> None:
        await self.semesters.refresh()
        await self.subjects.refresh()

    def subjects_by_semester(self) -> list[SemesterWithSubjects]:
        """Every loaded semester, in semester order, with its loaded subjects."""
        return [
            SemesterWithSubjects(
                **semester.model_dump(),
                subjects=self.subjects.for_semester(semester.id),
            )
            for semester in self.semesters.items
        ]
