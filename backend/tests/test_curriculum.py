"""Tests for semesters, subjects and their referential rules."""

import logging
from datetime import date

from agrostudy.errors import ConflictError, ValidationError
from agrostudy.gateway.base import SEMESTERS, SUBJECTS
from agrostudy.hooks import Curriculum, NotesHook, SemestersHook
from agrostudy.hooks.curriculum import SEMESTER_HAS_SUBJECTS, UNKNOWN_SEMESTER
from conftest import make_identity


async def mounted(session, gateway, notifier) -> Curriculum:
    return await Curriculum(session, gateway, notifier).mount()


async def test_semester_and_subject_grouped(session, gateway, notifier, semester_data):
    curriculum = await mounted(session, gateway, notifier)

    semester = await curriculum.semesters.create(semester_data)
    assert notifier.last.title == "Semestre criado"
    assert notifier.last.description == 'Semestre "2024.1" criado com sucesso'

    subject = await curriculum.subjects.create({"name": "Solos", "code": "SOL101", "semester_id": semester.id})
    assert subject.color == "#22c55e"
    assert notifier.last.description == 'Disciplina "Solos" criada com sucesso'

    grouped = curriculum.subjects_by_semester()
    assert len(grouped) == 1
    assert grouped[0].id == semester.id
    assert [s.name for s in grouped[0].subjects] == ["Solos"]


async def test_semesters_latest_start_first_and_subjects_by_name(session, gateway, notifier):
    curriculum = await mounted(session, gateway, notifier)
    older = await curriculum.semesters.create(
        {"title": "2023.2", "start_date": date(2023, 8, 1), "end_date": date(2023, 12, 15)}
    )
    newer = await curriculum.semesters.create(
        {"title": "2024.1", "start_date": date(2024, 2, 1), "end_date": date(2024, 6, 30)}
    )
    for name in ("Zootecnia", "Agronomia", "Fitotecnia"):
        await curriculum.subjects.create({"name": name, "semester_id": newer.id})

    assert [s.id for s in curriculum.semesters.items] == [newer.id, older.id]
    assert [s.name for s in curriculum.subjects.items] == ["Agronomia", "Fitotecnia", "Zootecnia"]
    assert curriculum.subjects.for_semester(older.id) == []


async def test_subject_requires_a_loaded_semester(session, gateway, notifier):
    curriculum = await mounted(session, gateway, notifier)

    subject = await curriculum.subjects.create({"name": "Solos", "semester_id": make_identity().id})

    assert subject is None
    assert isinstance(curriculum.subjects.last_error, ValidationError)
    assert curriculum.subjects.last_error.message == UNKNOWN_SEMESTER
    assert gateway.count("insert", SUBJECTS) == 0


async def test_semester_with_subjects_cannot_be_deleted(session, gateway, notifier, semester_data):
    curriculum = await mounted(session, gateway, notifier)
    semester = await curriculum.semesters.create(semester_data)
    await curriculum.subjects.create({"name": "Solos", "semester_id": semester.id})

    assert not await curriculum.semesters.delete(semester.id)

    assert isinstance(curriculum.semesters.last_error, ConflictError)
    assert notifier.last.title == "Erro ao remover semestre"
    assert notifier.last.description == SEMESTER_HAS_SUBJECTS
    assert gateway.count("delete", SEMESTERS) == 0
    assert curriculum.semesters.get(semester.id) is not None


async def test_semester_deletable_once_empty(session, gateway, notifier, semester_data):
    curriculum = await mounted(session, gateway, notifier)
    semester = await curriculum.semesters.create(semester_data)
    subject = await curriculum.subjects.create({"name": "Solos", "semester_id": semester.id})

    assert await curriculum.subjects.delete(subject.id)
    assert await curriculum.semesters.delete(semester.id)

    assert curriculum.semesters.items == []
    assert notifier.last.description == "O semestre foi removido com sucesso"


async def test_subject_moves_only_to_a_loaded_semester(session, gateway, notifier, semester_data):
    curriculum = await mounted(session, gateway, notifier)
    first = await curriculum.semesters.create(semester_data)
    second = await curriculum.semesters.create(
        {"title": "2024.2", "start_date": date(2024, 8, 1), "end_date": date(2024, 12, 15)}
    )
    subject = await curriculum.subjects.create({"name": "Solos", "semester_id": first.id})

    assert not await curriculum.subjects.update(subject.id, {"semester_id": make_identity().id})
    assert curriculum.subjects.last_error.message == UNKNOWN_SEMESTER

    assert await curriculum.subjects.update(subject.id, {"semester_id": second.id})
    assert curriculum.subjects.get(subject.id).semester_id == second.id


async def test_semester_update_checks_merged_dates(session, gateway, notifier, semester_data):
    curriculum = await mounted(session, gateway, notifier)
    semester = await curriculum.semesters.create(semester_data)

    assert not await curriculum.semesters.update(semester.id, {"end_date": date(2024, 1, 1)})

    assert isinstance(curriculum.semesters.last_error, ValidationError)
    assert gateway.count("update", SEMESTERS) == 0


async def test_semester_end_before_start_is_rejected(session, gateway, notifier):
    curriculum = await mounted(session, gateway, notifier)

    semester = await curriculum.semesters.create(
        {"title": "2024.1", "start_date": date(2024, 6, 30), "end_date": date(2024, 2, 1)}
    )

    assert semester is None
    assert gateway.count("insert", SEMESTERS) == 0


async def test_invalid_color_is_rejected(session, gateway, notifier, semester_data):
    curriculum = await mounted(session, gateway, notifier)
    semester = await curriculum.semesters.create(semester_data)

    subject = await curriculum.subjects.create({"name": "Solos", "semester_id": semester.id, "color": "verde"})

    assert subject is None
    assert curriculum.subjects.last_error.field == "color"


async def test_sign_out_clears_both_collections(session, gateway, notifier, semester_data):
    curriculum = await mounted(session, gateway, notifier)
    semester = await curriculum.semesters.create(semester_data)
    await curriculum.subjects.create({"name": "Solos", "semester_id": semester.id})

    await session.set_identity(None)

    assert curriculum.semesters.items == []
    assert curriculum.subjects.items == []
    assert curriculum.subjects_by_semester() == []


async def test_solos_scenario(session, gateway, notifier):
    curriculum = await mounted(session, gateway, notifier)
    semester = await curriculum.semesters.create(
        {"title": "2024.1", "start_date": date(2024, 2, 1), "end_date": date(2024, 6, 30)}
    )
    subject = await curriculum.subjects.create(
        {"name": "Solos", "code": "SOL101", "color": "#f59e0b", "semester_id": semester.id}
    )
    notes = await NotesHook(session, gateway, notifier).mount()
    await notes.create({"title": "Aula 1", "content_md": "conteúdo", "subject_id": subject.id, "tags": ["prova"]})

    [note] = await notes.list()

    assert note.subject.name == "Solos"
    assert note.tags == ["prova"]


async def test_curriculum_links_semesters_to_subjects(session, gateway, notifier):
    curriculum = Curriculum(session, gateway, notifier)

    assert curriculum.semesters.subjects is curriculum.subjects
    assert curriculum.subjects.semesters is curriculum.semesters


async def test_unlinked_semesters_hook_warns_and_deletes(session, gateway, notifier, semester_data, caplog):
    semesters = await SemestersHook(session, gateway, notifier).mount()
    semester = await semesters.create(semester_data)

    with caplog.at_level(logging.WARNING, logger="agrostudy.hooks.curriculum"):
        assert await semesters.delete(semester.id)

    assert "without a linked subjects hook" in caplog.text
    assert semesters.items == []
