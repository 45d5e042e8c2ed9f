"""Tests for the technical visits hook and its photos."""

from datetime import date, datetime, timezone

from agrostudy.errors import NotFoundError, ValidationError
from agrostudy.gateway.base import VISIT_PHOTO_BUCKET, VISIT_PHOTOS
from agrostudy.hooks import VisitsHook

TODAY = date(2024, 5, 10)


def visit(location: str, on: date, kind: str = "producao-vegetal") -> dict:
    return {"location_text": location, "date": on, "kind": kind}


async def test_visits_most_recent_first_with_empty_photos(session, gateway, storage, notifier):
    hook = await VisitsHook(session, gateway, storage, notifier).mount()
    await hook.create(visit("Fazenda Boa Vista", date(2024, 4, 2)))
    await hook.create(visit("Cooperativa Agro Sul", date(2024, 5, 20), "agronegocio"))

    assert [v.location_text for v in hook.items] == ["Cooperativa Agro Sul", "Fazenda Boa Vista"]
    assert all(v.photos == [] for v in hook.items)
    assert all(v.offline_status == "synced" for v in hook.items)
    assert notifier.last.description == "Visita criada com sucesso!"


async def test_add_photo_stores_object_and_attaches(session, gateway, storage, notifier):
    hook = await VisitsHook(session, gateway, storage, notifier).mount()
    created = await hook.create(visit("Fazenda Boa Vista", TODAY))

    photo = await hook.add_photo(created.id, b"\xff\xd8jpeg", "lavoura.jpg", caption="Milho em V6")

    assert photo is not None
    assert photo.file_path.startswith(f"{session.user_id}/{created.id}/")
    assert photo.file_path.endswith("_lavoura.jpg")
    assert storage.objects[(VISIT_PHOTO_BUCKET, photo.file_path)] == b"\xff\xd8jpeg"
    assert photo.file_url == f"memory://storage/{VISIT_PHOTO_BUCKET}/{photo.file_path}"
    assert [p.caption for p in hook.get(created.id).photos] == ["Milho em V6"]
    assert notifier.last.description == "Foto adicionada com sucesso!"

    await hook.refresh()
    assert [p.id for p in hook.get(created.id).photos] == [photo.id]


async def test_photos_ordered_by_taken_at(session, gateway, storage, notifier):
    hook = await VisitsHook(session, gateway, storage, notifier).mount()
    created = await hook.create(visit("Fazenda Boa Vista", TODAY))

    await hook.add_photo(created.id, b"b", "b.jpg", taken_at=datetime(2024, 5, 10, 15, tzinfo=timezone.utc))
    await hook.add_photo(created.id, b"a", "a.jpg", taken_at=datetime(2024, 5, 10, 9, tzinfo=timezone.utc))

    assert [p.file_path.rsplit("_", 1)[-1] for p in hook.get(created.id).photos] == ["a.jpg", "b.jpg"]


async def test_add_photo_to_unknown_visit(session, gateway, storage, notifier):
    hook = await VisitsHook(session, gateway, storage, notifier).mount()
    created = await hook.create(visit("Fazenda Boa Vista", TODAY))
    await hook.delete(created.id)

    assert await hook.add_photo(created.id, b"x", "x.jpg") is None
    assert isinstance(hook.last_error, NotFoundError)
    assert storage.objects == {}


async def test_add_empty_photo_is_rejected(session, gateway, storage, notifier):
    hook = await VisitsHook(session, gateway, storage, notifier).mount()
    created = await hook.create(visit("Fazenda Boa Vista", TODAY))

    assert await hook.add_photo(created.id, b"", "vazia.jpg") is None
    assert isinstance(hook.last_error, ValidationError)


async def test_failed_photo_row_removes_object(session, gateway, storage, notifier):
    hook = await VisitsHook(session, gateway, storage, notifier).mount()
    created = await hook.create(visit("Fazenda Boa Vista", TODAY))
    gateway.fail_on("insert")

    assert await hook.add_photo(created.id, b"x", "x.jpg") is None

    assert storage.objects == {}
    assert hook.get(created.id).photos == []
    assert notifier.last.description == "Não foi possível enviar a foto."


async def test_delete_visit_removes_photos_and_objects(session, gateway, storage, notifier):
    hook = await VisitsHook(session, gateway, storage, notifier).mount()
    created = await hook.create(visit("Fazenda Boa Vista", TODAY))
    await hook.add_photo(created.id, b"x", "x.jpg")

    assert await hook.delete(created.id)

    assert storage.objects == {}
    assert await gateway.fetch_all(VISIT_PHOTOS, session.user_id) == []


async def test_stats(session, gateway, storage, notifier):
    hook = await VisitsHook(session, gateway, storage, notifier).mount()
    done = await hook.create(visit("Fazenda Boa Vista", date(2024, 5, 1)))
    await hook.create(visit("Haras Santa Fé", TODAY, "zootecnia"))
    await hook.create(visit("Sítio Verde", date(2024, 6, 1), "agroecologia"))
    await hook.add_photo(done.id, b"x", "x.jpg")

    stats = hook.stats(TODAY)

    assert stats.total == 3
    assert stats.completed == 2
    assert stats.scheduled == 1
    assert stats.total_photos == 1
    assert stats.by_kind == {"producao-vegetal": 1, "zootecnia": 1, "agroecologia": 1}
