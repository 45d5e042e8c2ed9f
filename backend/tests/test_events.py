"""Tests for the academic agenda hook."""

from datetime import datetime, timedelta, timezone

from agrostudy.errors import ValidationError
from agrostudy.gateway.base import EVENTS
from agrostudy.hooks import EventsHook

NOW = datetime(2024, 3, 13, 12, 0, tzinfo=timezone.utc)  # Wednesday


def event(title: str, starts_at: datetime, type: str = "outro", **extra) -> dict:
    return {"title": title, "starts_at": starts_at, "type": type, **extra}


async def test_events_soonest_first_and_stamped_manual(session, gateway, notifier):
    hook = await EventsHook(session, gateway, notifier).mount()
    await hook.create(event("Seminário", NOW + timedelta(days=9)))
    await hook.create(event("Prova de Solos", NOW + timedelta(days=2), "prova"))

    assert [e.title for e in hook.items] == ["Prova de Solos", "Seminário"]
    assert all(e.source == "manual" for e in hook.items)
    assert hook.items[0].reminders_min_before == [15, 60]
    assert notifier.last.description == "Evento criado com sucesso!"


async def test_update_of_start_reorders(session, gateway, notifier):
    hook = await EventsHook(session, gateway, notifier).mount()
    first = await hook.create(event("Aula prática", NOW + timedelta(days=1), "aula"))
    await hook.create(event("Entrega", NOW + timedelta(days=3), "trabalho"))

    assert await hook.update(first.id, {"starts_at": NOW + timedelta(days=5)})

    assert [e.title for e in hook.items] == ["Entrega", "Aula prática"]


async def test_naive_timestamps_are_utc(session, gateway, notifier):
    hook = await EventsHook(session, gateway, notifier).mount()

    created = await hook.create(event("Aula", datetime(2024, 3, 14, 8, 0)))

    assert created.starts_at == datetime(2024, 3, 14, 8, 0, tzinfo=timezone.utc)


async def test_end_before_start_is_rejected(session, gateway, notifier):
    hook = await EventsHook(session, gateway, notifier).mount()

    created = await hook.create(event("Aula", NOW, ends_at=NOW - timedelta(hours=1)))

    assert created is None
    assert isinstance(hook.last_error, ValidationError)
    assert gateway.count("insert", EVENTS) == 0


async def test_week_stats_use_half_open_sunday_window(session, gateway, notifier):
    hook = await EventsHook(session, gateway, notifier).mount()
    await hook.create(event("Prova", datetime(2024, 3, 10, 0, 0, tzinfo=timezone.utc), "prova"))
    await hook.create(event("Relatório", datetime(2024, 3, 16, 23, 59, tzinfo=timezone.utc), "trabalho"))
    await hook.create(event("Aula", datetime(2024, 3, 17, 0, 0, tzinfo=timezone.utc), "aula"))
    await hook.create(event("Reunião", datetime(2024, 3, 9, 23, 59, tzinfo=timezone.utc)))

    stats = hook.stats(NOW)

    assert stats.this_week == 2
    assert stats.exams == 1
    assert stats.assignments == 1
    assert stats.classes == 1


async def test_tier_and_upcoming(session, gateway, notifier):
    hook = await EventsHook(session, gateway, notifier).mount()
    past = await hook.create(event("Passado", NOW - timedelta(days=1)))
    exam = await hook.create(event("Prova", NOW + timedelta(days=3), "prova"))
    later = await hook.create(event("Palestra", NOW + timedelta(days=20), priority="medium"))

    assert hook.tier(exam, NOW).label == "Alta"
    assert hook.tier(later, NOW).priority == "medium"
    assert [e.id for e in hook.upcoming(NOW)] == [exam.id, later.id]
    assert hook.upcoming(NOW, limit=1) == [exam]
    assert past not in hook.upcoming(NOW)
