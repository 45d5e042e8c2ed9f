"""Pytest configuration and fixtures."""

import os

# Settings are read at import time; tests always run against the in-memory backends
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["GATEWAY_BACKEND"] = "memory"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["SUGGESTION_BACKEND"] = "simulated"
os.environ["SIMULATED_REPLY_DELAY_SECONDS"] = "0"
os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"

from collections.abc import AsyncGenerator
from datetime import date
from uuid import uuid4

import pymupdf
import pytest
from httpx import ASGITransport, AsyncClient

from agrostudy.api.deps import get_auth_backend, get_gateway, get_storage
from agrostudy.errors import GatewayError
from agrostudy.gateway.memory import InMemoryGateway, InMemoryObjectStorage
from agrostudy.main import app
from agrostudy.notifications import RecordingNotifier
from agrostudy.schemas.auth import Identity
from agrostudy.services.auth import InMemoryAuthBackend
from agrostudy.session import Session


class SpyGateway(InMemoryGateway):
    """In-memory gateway that records calls and can be told to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, str]] = []
        self.failing: set[str] = set()

    def fail_on(self, *operations: str) -> None:
        self.failing.update(operations)

    def _record(self, operation: str, collection: str) -> None:
        self.calls.append((operation, collection))
        if operation in self.failing:
            raise GatewayError(f"Simulated {operation} failure on {collection}")

    def count(self, operation: str, collection: str | None = None) -> int:
        return sum(1 for op, coll in self.calls if op == operation and collection in (None, coll))

    async def fetch_all(self, collection, owner_id, order_by=(), joins=()):
        self._record("fetch_all", collection)
        return await super().fetch_all(collection, owner_id, order_by, joins)

    async def insert(self, collection, row, joins=()):
        self._record("insert", collection)
        return await super().insert(collection, row, joins)

    async def update(self, collection, id, owner_id, patch, joins=()):
        self._record("update", collection)
        return await super().update(collection, id, owner_id, patch, joins)

    async def delete(self, collection, id, owner_id):
        self._record("delete", collection)
        return await super().delete(collection, id, owner_id)


def make_identity(name: str = "Ana Souza") -> Identity:
    return Identity(id=uuid4(), email=f"{uuid4().hex[:8]}@agro.edu.br", name=name)


@pytest.fixture
def gateway() -> SpyGateway:
    return SpyGateway()


@pytest.fixture
def storage() -> InMemoryObjectStorage:
    return InMemoryObjectStorage()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def identity() -> Identity:
    return make_identity()


@pytest.fixture
def session(identity: Identity, notifier: RecordingNotifier) -> Session:
    return Session(notifier=notifier, identity=identity)


@pytest.fixture
def pdf_bytes() -> bytes:
    """A one-page PDF document."""
    doc = pymupdf.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Manejo do solo")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def semester_data() -> dict:
    return {"title": "2024.1", "start_date": date(2024, 2, 1), "end_date": date(2024, 6, 30)}


@pytest.fixture
async def client(gateway: SpyGateway, storage: InMemoryObjectStorage) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints, backed by fresh in-memory stores."""
    auth = InMemoryAuthBackend(iterations=1000)
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_auth_backend] = lambda: auth
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


async def register(client: AsyncClient, email: str = "ana@agro.edu.br", password: str = "segredo123") -> dict:
    """Sign up and log in; returns the Authorization header."""
    response = await client.post("/auth/signup", json={"email": email, "password": password, "name": "Ana"})
    assert response.status_code == 201, response.text
    response = await client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
async def auth_headers(client: AsyncClient) -> dict:
    return await register(client)


@pytest.fixture
async def other_headers(client: AsyncClient, auth_headers: dict) -> dict:
    """A second account on the same backends."""
    return await register(client, email="bruno@agro.edu.br")
