"""PostgreSQL implementation of the RemoteDataGateway contract."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import delete, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agrostudy.db.base import Base
from agrostudy.db.models import MODELS_BY_COLLECTION
from agrostudy.errors import GatewayError, NotFoundError
from agrostudy.gateway.base import Join, OrderBy, Row, attach_joins

logger = logging.getLogger(__name__)

_READ_ONLY_COLUMNS = {"id", "user_id", "created_at", "updated_at"}


class SqlGateway:
    """
    Gateway over SQLAlchemy async sessions.

    Each call opens its own short-lived session and commits it. Every
    statement, including join resolution, carries the user_id predicate.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @staticmethod
    def _model(collection: str) -> type[Base]:
        try:
            return MODELS_BY_COLLECTION[collection]
        except KeyError:
            raise GatewayError(f"Unknown collection: {collection}") from None

    @staticmethod
    def _columns(model: type[Base]) -> set[str]:
        return {attr.key for attr in inspect(model).column_attrs}

    @staticmethod
    def _to_row(obj: Base) -> Row:
        return {attr.key: getattr(obj, attr.key) for attr in inspect(type(obj)).column_attrs}

    @staticmethod
    def _order(model: type[Base], order: OrderBy):
        column = getattr(model, order.field)
        return column.desc() if order.descending else column.asc()

    async def _resolve(
        self,
        db: AsyncSession,
        rows: list[Row],
        owner_id: UUID,
        joins: tuple[Join, ...],
    ) -> list[Row]:
        related: dict[str, list[Row]] = {}
        for join in joins:
            model = self._model(join.collection)
            keys = {row[join.local_key] for row in rows if row.get(join.local_key) is not None}
            if not keys:
                related[join.name] = []
                continue
            stmt = select(model).where(
                getattr(model, join.remote_key).in_(keys),
                model.user_id == owner_id,
            )
            if join.order_by:
                stmt = stmt.order_by(self._order(model, join.order_by))
            result = await db.execute(stmt)
            related[join.name] = [self._to_row(obj) for obj in result.scalars()]
        return attach_joins(rows, joins, related)

    async def fetch_all(
        self,
        collection: str,
        owner_id: UUID,
        order_by: tuple[OrderBy, ...] = (),
        joins: tuple[Join, ...] = (),
    ) -> list[Row]:
        model = self._model(collection)
        query = select(model).where(model.user_id == owner_id)
        query = query.order_by(*(self._order(model, order) for order in order_by))
        try:
            async with self.session_factory() as db:
                result = await db.execute(query)
                rows = [self._to_row(obj) for obj in result.scalars()]
                return await self._resolve(db, rows, owner_id, joins)
        except SQLAlchemyError as e:
            logger.error("Failed to fetch %s for %s: %s", collection, owner_id, str(e), exc_info=True)
            raise GatewayError(f"Failed to fetch {collection}") from e

    async def insert(self, collection: str, row: Row, joins: tuple[Join, ...] = ()) -> Row:
        model = self._model(collection)
        if row.get("user_id") is None:
            raise GatewayError(f"Refusing to insert into {collection} without an owner")
        columns = self._columns(model)
        obj = model(**{k: v for k, v in row.items() if k in columns and k not in {"id", "created_at", "updated_at"}})
        try:
            async with self.session_factory() as db:
                db.add(obj)
                await db.commit()
                await db.refresh(obj)
                return (await self._resolve(db, [self._to_row(obj)], obj.user_id, joins))[0]
        except SQLAlchemyError as e:
            logger.error("Failed to insert into %s: %s", collection, str(e), exc_info=True)
            raise GatewayError(f"Failed to insert into {collection}") from e

    async def update(
        self,
        collection: str,
        id: UUID,
        owner_id: UUID,
        patch: Row,
        joins: tuple[Join, ...] = (),
    ) -> Row:
        model = self._model(collection)
        columns = self._columns(model) - _READ_ONLY_COLUMNS
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    select(model).where(model.id == id, model.user_id == owner_id)
                )
                obj = result.scalar_one_or_none()
                if obj is None:
                    raise NotFoundError(f"{collection} row {id} not found")
                for key, value in patch.items():
                    if key in columns:
                        setattr(obj, key, value)
                obj.updated_at = datetime.now(timezone.utc)
                await db.commit()
                await db.refresh(obj)
                return (await self._resolve(db, [self._to_row(obj)], owner_id, joins))[0]
        except SQLAlchemyError as e:
            logger.error("Failed to update %s %s: %s", collection, id, str(e), exc_info=True)
            raise GatewayError(f"Failed to update {collection}") from e

    async def delete(self, collection: str, id: UUID, owner_id: UUID) -> None:
        model = self._model(collection)
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    delete(model).where(model.id == id, model.user_id == owner_id)
                )
                if result.rowcount == 0:
                    await db.rollback()
                    raise NotFoundError(f"{collection} row {id} not found")
                await db.commit()
        except SQLAlchemyError as e:
            logger.error("Failed to delete %s %s: %s", collection, id, str(e), exc_info=True)
            raise GatewayError(f"Failed to delete from {collection}") from e
