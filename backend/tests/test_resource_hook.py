"""Tests for the generic owner-scoped resource hook, exercised through NotesHook."""

import asyncio

import pytest

from agrostudy.errors import AuthError, GatewayError, NotFoundError, RequestInFlightError, ValidationError
from agrostudy.gateway.base import NOTES
from agrostudy.hooks import HookPhase, NotesHook
from agrostudy.session import Session
from conftest import SpyGateway, make_identity


class BlockingGateway(SpyGateway):
    """Holds the chosen operations until ``release`` is called."""

    def __init__(self, *blocked: str) -> None:
        super().__init__()
        self.blocked = set(blocked)
        self.gate = asyncio.Event()

    def release(self) -> None:
        self.gate.set()

    async def _wait(self, operation: str) -> None:
        if operation in self.blocked:
            await self.gate.wait()

    async def fetch_all(self, collection, owner_id, order_by=(), joins=()):
        await self._wait("fetch_all")
        return await super().fetch_all(collection, owner_id, order_by, joins)

    async def insert(self, collection, row, joins=()):
        await self._wait("insert")
        return await super().insert(collection, row, joins)


async def mounted(session, gateway, notifier) -> NotesHook:
    return await NotesHook(session, gateway, notifier).mount()


class TestLoading:
    async def test_mount_loads_owned_rows_newest_first(self, session, gateway, notifier):
        owner = session.user_id
        await gateway.insert(NOTES, {"user_id": owner, "title": "Primeira", "content_md": "", "tags": []})
        await gateway.insert(NOTES, {"user_id": owner, "title": "Segunda", "content_md": "", "tags": []})
        await gateway.insert(NOTES, {"user_id": make_identity().id, "title": "Alheia", "content_md": "", "tags": []})

        hook = await mounted(session, gateway, notifier)

        assert hook.phase == HookPhase.READY
        assert [n.title for n in hook.items] == ["Segunda", "Primeira"]

    async def test_mount_without_identity_stays_uninitialized(self, gateway, notifier):
        hook = await mounted(Session(notifier=notifier), gateway, notifier)

        assert hook.phase == HookPhase.UNINITIALIZED
        assert hook.items == []
        assert gateway.calls == []

    async def test_load_failure_enters_error_idle(self, session, gateway, notifier):
        gateway.fail_on("fetch_all")

        hook = await mounted(session, gateway, notifier)

        assert hook.phase == HookPhase.ERROR_IDLE
        assert hook.items == []
        assert isinstance(hook.last_error, GatewayError)
        assert notifier.last.level == "error"
        assert notifier.last.description == "Não foi possível carregar as anotações."

    async def test_refresh_recovers_from_error_idle(self, session, gateway, notifier):
        gateway.fail_on("fetch_all")
        hook = await mounted(session, gateway, notifier)
        gateway.failing.clear()

        await hook.refresh()

        assert hook.phase == HookPhase.READY
        assert hook.last_error is None

    async def test_list_is_the_implicit_fetch(self, session, gateway, notifier):
        hook = NotesHook(session, gateway, notifier)
        await gateway.insert(NOTES, {"user_id": session.user_id, "title": "Solos", "content_md": "", "tags": []})

        items = await hook.list()

        assert [n.title for n in items] == ["Solos"]
        assert gateway.count("fetch_all", NOTES) == 1

    async def test_malformed_rows_are_skipped(self, session, gateway, notifier):
        owner = session.user_id
        await gateway.insert(NOTES, {"user_id": owner, "title": "", "content_md": "", "tags": []})
        await gateway.insert(NOTES, {"user_id": owner, "title": "Válida", "content_md": "", "tags": []})

        hook = await mounted(session, gateway, notifier)

        assert [n.title for n in hook.items] == ["Válida"]
        assert hook.phase == HookPhase.READY


class TestCreate:
    async def test_create_appends_server_row_and_notifies(self, session, gateway, notifier):
        hook = await mounted(session, gateway, notifier)

        note = await hook.create({"title": "Aula de solos", "content_md": "# Perfil", "tags": ["solo", "solo"]})

        assert note is not None
        assert note.user_id == session.user_id
        assert note.tags == ["solo"]
        assert hook.items == [note]
        assert hook.last_error is None
        assert notifier.last.title == "Sucesso"
        assert notifier.last.description == "Anotação criada com sucesso!"

    async def test_missing_required_field_never_reaches_gateway(self, session, gateway, notifier):
        hook = await mounted(session, gateway, notifier)

        assert await hook.create({"content_md": "sem título"}) is None

        assert isinstance(hook.last_error, ValidationError)
        assert hook.last_error.field == "title"
        assert notifier.last.title == "Campos obrigatórios"
        assert gateway.count("insert") == 0

    async def test_gateway_failure_leaves_items_unchanged(self, session, gateway, notifier):
        hook = await mounted(session, gateway, notifier)
        gateway.fail_on("insert")

        assert await hook.create({"title": "Aula"}) is None

        assert hook.items == []
        assert isinstance(hook.last_error, GatewayError)
        assert notifier.last.description == "Não foi possível criar a anotação."

    async def test_create_without_identity_fails_locally(self, gateway, notifier):
        hook = await mounted(Session(notifier=notifier), gateway, notifier)

        assert await hook.create({"title": "Aula"}) is None

        assert isinstance(hook.last_error, AuthError)
        assert gateway.calls == []

    async def test_concurrent_create_is_rejected_while_in_flight(self, session, notifier):
        gateway = BlockingGateway("insert")
        hook = await mounted(session, gateway, notifier)

        first = asyncio.create_task(hook.create({"title": "Primeira"}))
        await asyncio.sleep(0)
        second = await hook.create({"title": "Segunda"})
        gateway.release()
        created = await first

        assert second is None
        assert created is not None
        assert [n.title for n in hook.items] == ["Primeira"]
        assert gateway.count("insert") == 1

    async def test_in_flight_rejection_is_recorded(self, session, notifier):
        gateway = BlockingGateway("insert")
        hook = await mounted(session, gateway, notifier)

        first = asyncio.create_task(hook.create({"title": "Primeira"}))
        await asyncio.sleep(0)
        await hook.create({"title": "Segunda"})
        rejected = hook.last_error
        gateway.release()
        await first

        assert isinstance(rejected, RequestInFlightError)


class TestUpdate:
    async def test_update_replaces_with_server_row(self, session, gateway, notifier):
        hook = await mounted(session, gateway, notifier)
        note = await hook.create({"title": "Rascunho"})

        assert await hook.update(note.id, {"title": "Final"})

        updated = hook.get(note.id)
        assert updated.title == "Final"
        assert updated.updated_at > note.updated_at
        assert notifier.last.description == "Anotação atualizada com sucesso!"

    async def test_update_unknown_id_is_not_found_without_remote_call(self, session, gateway, notifier):
        hook = await mounted(session, gateway, notifier)

        assert not await hook.update(make_identity().id, {"title": "X"})

        assert isinstance(hook.last_error, NotFoundError)
        assert gateway.count("update") == 0

    async def test_empty_patch_is_rejected(self, session, gateway, notifier):
        hook = await mounted(session, gateway, notifier)
        note = await hook.create({"title": "Rascunho"})

        assert not await hook.update(note.id, {})

        assert isinstance(hook.last_error, ValidationError)
        assert gateway.count("update") == 0

    async def test_update_failure_keeps_previous_value(self, session, gateway, notifier):
        hook = await mounted(session, gateway, notifier)
        note = await hook.create({"title": "Rascunho"})
        gateway.fail_on("update")

        assert not await hook.update(note.id, {"title": "Final"})

        assert hook.get(note.id).title == "Rascunho"
        assert notifier.last.description == "Não foi possível atualizar a anotação."


class TestDelete:
    async def test_delete_removes_after_remote_success(self, session, gateway, notifier):
        hook = await mounted(session, gateway, notifier)
        note = await hook.create({"title": "Descartável"})

        assert await hook.delete(note.id)

        assert hook.get(note.id) is None
        assert await gateway.fetch_all(NOTES, session.user_id) == []
        assert notifier.last.description == "Anotação excluída com sucesso!"

    async def test_delete_failure_keeps_record(self, session, gateway, notifier):
        hook = await mounted(session, gateway, notifier)
        note = await hook.create({"title": "Importante"})
        gateway.fail_on("delete")

        assert not await hook.delete(note.id)

        assert hook.get(note.id) is not None
        assert notifier.last.description == "Não foi possível excluir a anotação."

    async def test_delete_unknown_id_is_not_found(self, session, gateway, notifier):
        hook = await mounted(session, gateway, notifier)

        assert not await hook.delete(make_identity().id)

        assert isinstance(hook.last_error, NotFoundError)
        assert gateway.count("delete") == 0


class TestIdentityChanges:
    async def test_sign_out_resets_collection(self, session, gateway, notifier):
        hook = await mounted(session, gateway, notifier)
        await hook.create({"title": "Privada"})

        await session.set_identity(None)

        assert hook.items == []
        assert hook.phase == HookPhase.UNINITIALIZED

    async def test_switching_identity_reloads_for_new_owner(self, session, gateway, notifier):
        hook = await mounted(session, gateway, notifier)
        await hook.create({"title": "Da Ana"})
        other = make_identity("Bruno")
        await gateway.insert(NOTES, {"user_id": other.id, "title": "Do Bruno", "content_md": "", "tags": []})

        await session.set_identity(other)

        assert [n.title for n in hook.items] == ["Do Bruno"]
        assert all(n.user_id == other.id for n in hook.items)

    async def test_late_load_result_is_discarded_after_sign_out(self, session, notifier):
        gateway = BlockingGateway("fetch_all")
        await gateway.insert(NOTES, {"user_id": session.user_id, "title": "Privada", "content_md": "", "tags": []})
        hook = NotesHook(session, gateway, notifier)

        loading = asyncio.create_task(hook.load())
        await asyncio.sleep(0)
        await session.set_identity(None)
        gateway.release()
        await loading

        assert hook.items == []
        assert hook.phase == HookPhase.UNINITIALIZED

    async def test_unmounted_hook_ignores_identity_changes(self, session, gateway, notifier):
        hook = await mounted(session, gateway, notifier)
        hook.unmount()
        fetches = gateway.count("fetch_all")

        await session.set_identity(make_identity("Bruno"))

        assert gateway.count("fetch_all") == fetches


@pytest.mark.parametrize("patch", [{"title": ""}, {"subject_id": "not-a-uuid"}])
async def test_invalid_patch_is_a_validation_error(session, gateway, notifier, patch):
    hook = await mounted(session, gateway, notifier)
    note = await hook.create({"title": "Rascunho"})

    assert not await hook.update(note.id, patch)

    assert isinstance(hook.last_error, ValidationError)
    assert hook.get(note.id).title == "Rascunho"


async def test_create_then_list_has_no_duplicates(session, gateway, notifier):
    hook = await mounted(session, gateway, notifier)
    await hook.create({"title": "Antiga"})
    created = await hook.create({"title": "Nova"})

    items = await hook.list()

    assert [n.id for n in items].count(created.id) == 1
    assert items[0].id == created.id
    assert len(items) == 2


async def test_refresh_is_idempotent(session, gateway, notifier):
    hook = await mounted(session, gateway, notifier)
    await hook.create({"title": "Solos", "tags": ["a", "b"]})
    await hook.create({"title": "Pragas"})

    first = [n.model_dump() for n in await hook.refresh()]
    second = [n.model_dump() for n in await hook.refresh()]

    assert first == second
