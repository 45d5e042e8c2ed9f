"""
Remote Data Gateway contract.

Rows travel as plain dicts keyed by column name. Every read and write is
scoped by the owner id; joins resolve related rows of the same owner and
attach them under ``Join.name``.
"""

from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID

Row = dict[str, Any]

# Collections
SEMESTERS = "semesters"
SUBJECTS = "subjects"
NOTES = "notes"
EVENTS = "events"
VISITS = "visits"
VISIT_PHOTOS = "visit_photos"
PDF_LIBRARY = "pdf_library"

COLLECTIONS = (SEMESTERS, SUBJECTS, NOTES, EVENTS, VISITS, VISIT_PHOTOS, PDF_LIBRARY)

# Object storage buckets
PDF_BUCKET = "pdf-documents"
VISIT_PHOTO_BUCKET = "visit-photos"


@dataclass(frozen=True)
class OrderBy:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class Join:
    """
    Related rows resolved inline.

    To-one: ``row[local_key]`` matches ``target[remote_key]``, attached as a
    dict or None. To-many (``many=True``): every target whose
    ``remote_key`` equals ``row[local_key]``, attached as a list.
    """

    name: str
    collection: str
    local_key: str
    remote_key: str = "id"
    fields: tuple[str, ...] = ()
    many: bool = False
    order_by: OrderBy | None = None

    def project(self, target: Row) -> Row:
        if not self.fields:
            return dict(target)
        return {f: target.get(f) for f in self.fields}


SUBJECT_JOIN = Join(
    name="subject",
    collection=SUBJECTS,
    local_key="subject_id",
    fields=("id", "name", "color"),
)

PHOTOS_JOIN = Join(
    name="photos",
    collection=VISIT_PHOTOS,
    local_key="id",
    remote_key="visit_id",
    fields=("id", "visit_id", "file_url", "file_path", "caption", "taken_at", "exif_json"),
    many=True,
    order_by=OrderBy("taken_at"),
)


class RemoteDataGateway(Protocol):
    async def fetch_all(
        self,
        collection: str,
        owner_id: UUID,
        order_by: tuple[OrderBy, ...] = (),
        joins: tuple[Join, ...] = (),
    ) -> list[Row]: ...

    async def insert(self, collection: str, row: Row, joins: tuple[Join, ...] = ()) -> Row: ...

    async def update(
        self,
        collection: str,
        id: UUID,
        owner_id: UUID,
        patch: Row,
        joins: tuple[Join, ...] = (),
    ) -> Row: ...

    async def delete(self, collection: str, id: UUID, owner_id: UUID) -> None: ...


class ObjectStorage(Protocol):
    async def upload_object(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> None: ...

    async def delete_object(self, bucket: str, path: str) -> None: ...

    def get_public_url(self, bucket: str, path: str) -> str: ...


def attach_joins(rows: list[Row], joins: tuple[Join, ...], related: dict[str, list[Row]]) -> list[Row]:
    """Attach already-fetched related rows (keyed by join name) onto ``rows``."""
    for join in joins:
        targets = related.get(join.name, [])
        if join.many:
            grouped: dict[Any, list[Row]] = {}
            for target in targets:
                grouped.setdefault(target.get(join.remote_key), []).append(join.project(target))
            for row in rows:
                row[join.name] = grouped.get(row.get(join.local_key), [])
        else:
            by_key = {target.get(join.remote_key): join.project(target) for target in targets}
            for row in rows:
                key = row.get(join.local_key)
                row[join.name] = by_key.get(key) if key is not None else None
    return rows


def sort_rows(rows: list[Row], order_by: tuple[OrderBy, ...]) -> list[Row]:
    """Stable multi-key sort; the first OrderBy is the primary key."""
    for order in reversed(order_by):
        rows.sort(key=lambda r: r[order.field], reverse=order.descending)
    return rows
