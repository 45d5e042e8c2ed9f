"""
Generic owner-scoped resource hook.

A hook owns the in-memory collection of one entity type for the identity
of the Session it was built with. It only changes that collection after
the gateway confirms a mutation, re-fetches on identity change and
resets when the identity goes away.

Lifecycle::

    UNINITIALIZED --identity--> LOADING --ok--> READY
                                        --err-> ERROR_IDLE
    any phase --sign-out--> UNINITIALIZED (empty collection)

Operations never raise domain errors to the caller. A failure is logged,
surfaced through the notifier, stored on ``last_error`` and reported by
the sentinel return value (``None`` for create, ``False`` for
update/delete).
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from operator import attrgetter
from typing import Any, ClassVar, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from agrostudy.errors import (
    AgroStudyError,
    AuthError,
    ConflictError,
    GatewayError,
    NotFoundError,
    RemoteError,
    RequestInFlightError,
    ValidationError,
)
from agrostudy.gateway.base import Join, OrderBy, RemoteDataGateway, Row
from agrostudy.notifications import LoggingNotifier, Notification, Notifier
from agrostudy.schemas.auth import Identity
from agrostudy.session import Session

logger = logging.getLogger(__name__)

ReadT = TypeVar("ReadT", bound=BaseModel)

NOT_AUTHENTICATED = "Usuário não autenticado."


class HookPhase(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    ERROR_IDLE = "error_idle"


@dataclass(frozen=True)
class Message:
    """
    Title and description of one notification.

    Success descriptions are formatted with the affected record's fields,
    e.g. ``'Semestre "{title}" criado com sucesso'``.
    """

    title: str
    description: str

    def render(self, record: BaseModel | None = None) -> "Message":
        if record is None:
            return self
        return Message(self.title, self.description.format_map(record.model_dump()))


@dataclass(frozen=True)
class HookMessages:
    """User-facing notification texts for one entity."""

    load_error: Message
    created: Message
    create_error: Message
    updated: Message
    update_error: Message
    deleted: Message
    delete_error: Message
    not_found: str = "Registro não encontrado."
    error_title: str = "Erro"
    validation_title: str = "Campos obrigatórios"


def crud_messages(singular: str, plural: str, article: str = "a") -> HookMessages:
    """Messages in the "Sucesso"/"Erro" style shared by notes, events and visits."""
    return HookMessages(
        load_error=Message("Erro", f"Não foi possível carregar {article}s {plural}."),
        created=Message("Sucesso", f"{singular.capitalize()} criad{article} com sucesso!"),
        create_error=Message("Erro", f"Não foi possível criar {article} {singular}."),
        updated=Message("Sucesso", f"{singular.capitalize()} atualizad{article} com sucesso!"),
        update_error=Message("Erro", f"Não foi possível atualizar {article} {singular}."),
        deleted=Message("Sucesso", f"{singular.capitalize()} excluíd{article} com sucesso!"),
        delete_error=Message("Erro", f"Não foi possível excluir {article} {singular}."),
    )


@dataclass(frozen=True)
class ResourceConfig:
    """Everything that varies between entity hooks."""

    entity: str
    collection: str
    read_schema: type[BaseModel]
    create_schema: type[BaseModel]
    update_schema: type[BaseModel]
    order_by: tuple[OrderBy, ...]
    messages: HookMessages
    joins: tuple[Join, ...] = ()
    # Columns stamped on every insert (e.g. source="manual")
    stamp: Mapping[str, Any] = field(default_factory=dict)


def parse_input(schema: type[BaseModel], data: Any) -> BaseModel:
    """Validate caller input against ``schema``, translating pydantic errors."""
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(part) for part in first["loc"]) or None
        message = f"{loc}: {first['msg']}" if loc else first["msg"]
        raise ValidationError(message, field=loc) from e


class ResourceHook(Generic[ReadT]):
    """Owner-scoped list/create/update/delete over the remote data gateway."""

    config: ClassVar[ResourceConfig]

    def __init__(
        self,
        session: Session,
        gateway: RemoteDataGateway,
        notifier: Notifier | None = None,
    ):
        self.session = session
        self.gateway = gateway
        self.notifier = notifier or LoggingNotifier()
        self.items: list[ReadT] = []
        self.phase = HookPhase.UNINITIALIZED
        self.last_error: AgroStudyError | None = None
        self._inflight: set[str] = set()
        self._unsubscribe = session.on_identity_change(self._on_identity_change)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def loading(self) -> bool:
        return self.phase == HookPhase.LOADING

    async def mount(self) -> "ResourceHook[ReadT]":
        """Load immediately if the session already has an identity."""
        if self.session.identity is not None:
            await self.load()
        return self

    def unmount(self) -> None:
        self._unsubscribe()

    async def _on_identity_change(self, identity: Identity | None) -> None:
        self.reset()
        if identity is not None:
            await self.load()

    def reset(self) -> None:
        self.items = []
        self.phase = HookPhase.UNINITIALIZED
        self.last_error = None
        self._inflight.clear()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def get(self, id: UUID) -> ReadT | None:
        return next((item for item in self.items if item.id == id), None)

    def _sort(self) -> None:
        for order in reversed(self.config.order_by):
            self.items.sort(key=attrgetter(order.field), reverse=order.descending)

    def _validate_row(self, row: Row, owner: UUID) -> ReadT:
        if row.get("user_id") != owner:
            raise GatewayError(f"{self.config.entity} row {row.get('id')} belongs to another owner")
        try:
            return self.config.read_schema.model_validate(row)
        except PydanticValidationError as e:
            raise GatewayError(f"Malformed {self.config.entity} row {row.get('id')}: {e}") from e

    def _notify_success(self, message: Message, record: BaseModel | None = None) -> None:
        message = message.render(record)
        self.notifier.notify(Notification("success", message.title, message.description))

    def _fail(self, error: AgroStudyError, message: Message | None = None) -> None:
        """Record, log and notify a failed operation."""
        messages = self.config.messages
        self.last_error = error
        if isinstance(error, RemoteError):
            logger.error("%s operation failed: %s", self.config.entity, error.message)
        else:
            logger.info("%s operation rejected: %s", self.config.entity, error.message)
        if message is None:
            title = messages.validation_title if isinstance(error, ValidationError) else messages.error_title
            message = Message(title, error.message)
        self.notifier.notify(Notification("error", message.title, message.description, error))

    def _begin(self, intent: str) -> bool:
        key = f"{self.config.entity}:{intent}"
        if key in self._inflight:
            logger.info("Ignoring %s while a previous one is in flight", key)
            self.last_error = RequestInFlightError(f"{key} already in progress")
            return False
        self._inflight.add(key)
        return True

    def _end(self, intent: str) -> None:
        self._inflight.discard(f"{self.config.entity}:{intent}")

    # ------------------------------------------------------------------
    # Extension points
    # ------------------------------------------------------------------

    async def check_create(self, payload: BaseModel) -> None:
        """Raise ValidationError/ConflictError to reject a create locally."""

    async def check_update(self, current: ReadT, patch: dict[str, Any]) -> None:
        """Raise ValidationError/ConflictError to reject an update locally."""

    async def check_delete(self, current: ReadT) -> None:
        """Raise ValidationError/ConflictError to reject a delete locally."""

    def build_row(self, payload: BaseModel, owner: UUID) -> Row:
        return {**payload.model_dump(), **self.config.stamp, "user_id": owner}

    async def delete_remote(self, current: ReadT, owner: UUID) -> None:
        await self.gateway.delete(self.config.collection, current.id, owner)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def load(self) -> list[ReadT]:
        """Fetch the whole owner-scoped collection, replacing local state on success."""
        owner = self.session.user_id
        if owner is None:
            return self.items

        config = self.config
        self.phase = HookPhase.LOADING
        try:
            rows = await self.gateway.fetch_all(
                config.collection, owner, order_by=config.order_by, joins=config.joins
            )
        except RemoteError as e:
            self.phase = HookPhase.ERROR_IDLE
            self._fail(e, config.messages.load_error)
            return self.items

        if self.session.user_id != owner:
            # Identity changed while the request was in flight
            return self.items

        items = []
        for row in rows:
            try:
                items.append(self._validate_row(row, owner))
            except GatewayError as e:
                logger.warning("Rejected %s row: %s", config.entity, e.message)
        self.items = items
        self._sort()
        self.phase = HookPhase.READY
        self.last_error = None
        return self.items

    async def refresh(self) -> list[ReadT]:
        return await self.load()

    async def create(self, data: Any) -> ReadT | None:
        """Create a record. Returns it, or None on failure."""
        owner = self.session.user_id
        if owner is None:
            self.last_error = AuthError(NOT_AUTHENTICATED)
            return None
        if not self._begin("create"):
            return None
        try:
            return await self._create(owner, data)
        finally:
            self._end("create")

    async def _create(self, owner: UUID, data: Any) -> ReadT | None:
        config = self.config
        try:
            payload = parse_input(config.create_schema, data)
            await self.check_create(payload)
        except (ValidationError, ConflictError) as e:
            self._fail(e)
            return None

        try:
            row = await self.gateway.insert(config.collection, self.build_row(payload, owner), joins=config.joins)
            record = self._validate_row(row, owner)
        except RemoteError as e:
            self._fail(e, config.messages.create_error)
            return None

        if self.session.user_id == owner:
            self.items.append(record)
            self._sort()
        self.last_error = None
        self._notify_success(config.messages.created, record)
        return record

    async def update(self, id: UUID, data: Any) -> bool:
        """Update a record of the loaded collection with the server-returned row."""
        owner = self.session.user_id
        if owner is None:
            self.last_error = AuthError(NOT_AUTHENTICATED)
            return False
        if not self._begin("update"):
            return False
        try:
            return await self._update(owner, id, data, self.config.messages.updated, self.config.messages.update_error)
        finally:
            self._end("update")

    async def _update(self, owner: UUID, id: UUID, data: Any, success: Message, failure: Message) -> bool:
        config = self.config
        current = self.get(id)
        if current is None:
            self._fail(NotFoundError(config.messages.not_found))
            return False

        try:
            patch = parse_input(config.update_schema, data).model_dump(exclude_unset=True)
            if not patch:
                raise ValidationError("Nenhum campo para atualizar.")
            # Cross-field invariants must hold on the merged record
            parse_input(config.read_schema, {**current.model_dump(), **patch})
            await self.check_update(current, patch)
        except (ValidationError, ConflictError) as e:
            self._fail(e)
            return False

        try:
            row = await self.gateway.update(config.collection, id, owner, patch, joins=config.joins)
            record = self._validate_row(row, owner)
        except RemoteError as e:
            self._fail(e, failure)
            return False

        self.items = [record if item.id == id else item for item in self.items]
        self._sort()
        self.last_error = None
        self._notify_success(success, record)
        return True

    async def delete(self, id: UUID) -> bool:
        """Delete a record of the loaded collection, remotely then locally."""
        owner = self.session.user_id
        if owner is None:
            self.last_error = AuthError(NOT_AUTHENTICATED)
            return False
        if not self._begin("delete"):
            return False
        try:
            return await self._delete(owner, id)
        finally:
            self._end("delete")

    async def _delete(self, owner: UUID, id: UUID) -> bool:
        config = self.config
        current = self.get(id)
        if current is None:
            self._fail(NotFoundError(config.messages.not_found))
            return False

        try:
            await self.check_delete(current)
        except (ValidationError, ConflictError) as e:
            self._fail(e, Message(config.messages.delete_error.title, e.message))
            return False

        try:
            await self.delete_remote(current, owner)
        except RemoteError as e:
            self._fail(e, config.messages.delete_error)
            return False

        self.items = [item for item in self.items if item.id != id]
        self.last_error = None
        self._notify_success(config.messages.deleted, current)
        return True

    async def list(self):  # noqa: A003
        """Implicit fetch that runs on mount and on identity change."""
        return await self.load()
