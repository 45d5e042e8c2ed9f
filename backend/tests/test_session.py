"""Tests for the session store and the in-memory auth backend."""

import pytest

from agrostudy.errors import AuthError
from agrostudy.services.auth import EMAIL_TAKEN, INVALID_CREDENTIALS, InMemoryAuthBackend, hash_password, verify_password
from agrostudy.session import Session


@pytest.fixture
def auth() -> InMemoryAuthBackend:
    return InMemoryAuthBackend(iterations=1000)


async def test_sign_up_does_not_sign_in(auth, notifier):
    session = Session(auth=auth, notifier=notifier)

    identity = await session.sign_up("Ana@Agro.edu.br", "segredo123", "Ana")

    assert identity.email == "ana@agro.edu.br"
    assert session.identity is None
    assert notifier.last.title == "Conta criada com sucesso!"


async def test_duplicate_email_is_rejected(auth, notifier):
    session = Session(auth=auth, notifier=notifier)
    await session.sign_up("ana@agro.edu.br", "segredo123", "Ana")

    with pytest.raises(AuthError, match=EMAIL_TAKEN):
        await session.sign_up("ANA@agro.edu.br", "outrasenha", "Ana")


async def test_sign_in_notifies_listeners(auth, notifier):
    session = Session(auth=auth, notifier=notifier)
    await session.sign_up("ana@agro.edu.br", "segredo123", "Ana")
    seen = []

    async def listener(identity):
        seen.append(identity)

    session.on_identity_change(listener)
    identity = await session.sign_in("ana@agro.edu.br", "segredo123")

    assert session.user_id == identity.id
    assert seen == [identity]
    assert session.loading is False


async def test_wrong_password_keeps_session_empty(auth, notifier):
    session = Session(auth=auth, notifier=notifier)
    await session.sign_up("ana@agro.edu.br", "segredo123", "Ana")

    with pytest.raises(AuthError, match=INVALID_CREDENTIALS):
        await session.sign_in("ana@agro.edu.br", "errada")

    assert session.identity is None
    assert session.loading is False


async def test_sign_out_clears_identity_and_notifies(auth, notifier):
    session = Session(auth=auth, notifier=notifier)
    await session.sign_up("ana@agro.edu.br", "segredo123", "Ana")
    await session.sign_in("ana@agro.edu.br", "segredo123")
    seen = []

    async def listener(identity):
        seen.append(identity)

    unsubscribe = session.on_identity_change(listener)
    await session.sign_out()
    unsubscribe()
    await session.sign_in("ana@agro.edu.br", "segredo123")

    assert seen == [None]


async def test_setting_same_identity_does_not_refire(identity, notifier):
    session = Session(notifier=notifier, identity=identity)
    calls = []

    async def listener(value):
        calls.append(value)

    session.on_identity_change(listener)
    await session.set_identity(identity)

    assert calls == []


async def test_sign_in_without_backend_fails(notifier):
    with pytest.raises(AuthError):
        await Session(notifier=notifier).sign_in("ana@agro.edu.br", "segredo123")


def test_password_hash_roundtrip():
    encoded = hash_password("segredo123", iterations=1000)

    assert encoded.startswith("pbkdf2_sha256$1000$")
    assert verify_password("segredo123", encoded)
    assert not verify_password("outra", encoded)
    assert not verify_password("segredo123", "md5$abc")
