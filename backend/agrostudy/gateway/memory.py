"""In-process gateway and object storage used for demo mode and tests."""

import copy
import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

from agrostudy.errors import GatewayError, NotFoundError
from agrostudy.gateway.base import (
    COLLECTIONS,
    EVENTS,
    NOTES,
    SEMESTERS,
    SUBJECTS,
    VISIT_PHOTOS,
    VISITS,
    Join,
    OrderBy,
    Row,
    attach_joins,
    sort_rows,
)

logger = logging.getLogger(__name__)

# Mirrors the foreign keys of the SQL schema
_CASCADE = {VISITS: [(VISIT_PHOTOS, "visit_id")]}
_SET_NULL = {SUBJECTS: [(NOTES, "subject_id"), (EVENTS, "subject_id"), (VISITS, "subject_id")]}
_RESTRICT = {SEMESTERS: [(SUBJECTS, "semester_id")]}

_READ_ONLY_COLUMNS = {"id", "user_id", "created_at"}


class InMemoryGateway:
    """
    Dict-backed implementation of the RemoteDataGateway contract.

    Rows are deep-copied on the way in and out so callers never share
    state with the store.
    """

    def __init__(self) -> None:
        self._tables: dict[str, dict[UUID, Row]] = {name: {} for name in COLLECTIONS}
        self._last_timestamp = datetime.min.replace(tzinfo=timezone.utc)

    def _now(self) -> datetime:
        # Strictly increasing so "newest first" orderings are deterministic
        now = datetime.now(timezone.utc)
        if now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now

    def _table(self, collection: str) -> dict[UUID, Row]:
        try:
            return self._tables[collection]
        except KeyError:
            raise GatewayError(f"Unknown collection: {collection}") from None

    def _owned(self, collection: str, owner_id: UUID) -> list[Row]:
        return [copy.deepcopy(r) for r in self._table(collection).values() if r["user_id"] == owner_id]

    def _resolve(self, rows: list[Row], owner_id: UUID, joins: tuple[Join, ...]) -> list[Row]:
        related = {}
        for join in joins:
            targets = self._owned(join.collection, owner_id)
            if join.order_by:
                sort_rows(targets, (join.order_by,))
            related[join.name] = targets
        return attach_joins(rows, joins, related)

    async def fetch_all(
        self,
        collection: str,
        owner_id: UUID,
        order_by: tuple[OrderBy, ...] = (),
        joins: tuple[Join, ...] = (),
    ) -> list[Row]:
        rows = sort_rows(self._owned(collection, owner_id), order_by)
        return self._resolve(rows, owner_id, joins)

    async def insert(self, collection: str, row: Row, joins: tuple[Join, ...] = ()) -> Row:
        table = self._table(collection)
        if row.get("user_id") is None:
            raise GatewayError(f"Refusing to insert into {collection} without an owner")
        now = self._now()
        stored = copy.deepcopy(row)
        stored["id"] = uuid4()
        stored["created_at"] = now
        stored["updated_at"] = now
        table[stored["id"]] = stored
        return self._resolve([copy.deepcopy(stored)], stored["user_id"], joins)[0]

    async def update(
        self,
        collection: str,
        id: UUID,
        owner_id: UUID,
        patch: Row,
        joins: tuple[Join, ...] = (),
    ) -> Row:
        stored = self._table(collection).get(id)
        if stored is None or stored["user_id"] != owner_id:
            raise NotFoundError(f"{collection} row {id} not found")
        for key, value in patch.items():
            if key not in _READ_ONLY_COLUMNS:
                stored[key] = copy.deepcopy(value)
        stored["updated_at"] = self._now()
        return self._resolve([copy.deepcopy(stored)], owner_id, joins)[0]

    async def delete(self, collection: str, id: UUID, owner_id: UUID) -> None:
        table = self._table(collection)
        stored = table.get(id)
        if stored is None or stored["user_id"] != owner_id:
            raise NotFoundError(f"{collection} row {id} not found")

        for child, fk in _RESTRICT.get(collection, []):
            if any(r[fk] == id for r in self._table(child).values()):
                raise GatewayError(f"{collection} row {id} is still referenced by {child}")

        for child, fk in _CASCADE.get(collection, []):
            child_table = self._table(child)
            for child_id in [k for k, r in child_table.items() if r.get(fk) == id]:
                del child_table[child_id]

        for child, fk in _SET_NULL.get(collection, []):
            for r in self._table(child).values():
                if r.get(fk) == id:
                    r[fk] = None

        del table[id]


class InMemoryObjectStorage:
    """Object storage kept in a dict keyed by (bucket, path)."""

    def __init__(self, public_base_url: str = "memory://storage") -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.public_base_url = public_base_url.rstrip("/")

    async def upload_object(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> None:
        if (bucket, path) in self.objects:
            raise GatewayError(f"Object already exists: {bucket}/{path}")
        self.objects[(bucket, path)] = bytes(data)
        logger.debug("Stored %d bytes at %s/%s (%s)", len(data), bucket, path, content_type)

    async def delete_object(self, bucket: str, path: str) -> None:
        if self.objects.pop((bucket, path), None) is None:
            raise NotFoundError(f"Object not found: {bucket}/{path}")

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}/{bucket}/{path}"
