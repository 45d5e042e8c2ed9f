"""Technical visits hook."""

import logging
import time
from datetime import date, datetime, timezone
from pathlib import PurePosixPath
from typing import Any
from uuid import UUID

from agrostudy.errors import AuthError, NotFoundError, RemoteError, ValidationError
from agrostudy.gateway.base import (
    PHOTOS_JOIN,
    SUBJECT_JOIN,
    VISIT_PHOTO_BUCKET,
    VISIT_PHOTOS,
    VISITS,
    ObjectStorage,
    OrderBy,
    RemoteDataGateway,
)
from agrostudy.hooks.resource import (
    NOT_AUTHENTICATED,
    Message,
    ResourceConfig,
    ResourceHook,
    crud_messages,
)
from agrostudy.notifications import Notifier
from agrostudy.schemas.visits import VisitCreate, VisitPhotoRead, VisitRead, VisitStats, VisitUpdate
from agrostudy.services.stats import visit_stats
from agrostudy.session import Session

logger = logging.getLogger(__name__)

VISIT_CONFIG = ResourceConfig(
    entity="visit",
    collection=VISITS,
    read_schema=VisitRead,
    create_schema=VisitCreate,
    update_schema=VisitUpdate,
    order_by=(OrderBy("date", descending=True),),
    joins=(SUBJECT_JOIN, PHOTOS_JOIN),
    messages=crud_messages("visita", "visitas"),
    stamp={"offline_status": "synced"},
)

PHOTO_ADDED = Message("Sucesso", "Foto adicionada com sucesso!")
PHOTO_ERROR = Message("Erro", "Não foi possível enviar a foto.")


class VisitsHook(ResourceHook[VisitRead]):
    """Field visits of the current identity, most recent date first, with photos."""

    config = VISIT_CONFIG

    def __init__(
        self,
        session: Session,
        gateway: RemoteDataGateway,
        storage: ObjectStorage,
        notifier: Notifier | None = None,
    ):
        super().__init__(session, gateway, notifier)
        self.storage = storage

    def stats(self, today: date | None = None) -> VisitStats:
        return visit_stats(self.items, today or date.today())

    async def delete_remote(self, current: VisitRead, owner: UUID) -> None:
        await super().delete_remote(current, owner)
        # Photo rows cascade with the visit; their objects are cleaned up best-effort
        for photo in current.photos:
            if not photo.file_path:
                continue
            try:
                await self.storage.delete_object(VISIT_PHOTO_BUCKET, photo.file_path)
            except RemoteError as e:
                logger.warning("Failed to delete photo object %s: %s", photo.file_path, e.message)

    async def add_photo(
        self,
        visit_id: UUID,
        data: bytes,
        file_name: str,
        caption: str | None = None,
        content_type: str = "image/jpeg",
        taken_at: datetime | None = None,
        exif: dict[str, Any] | None = None,
    ) -> VisitPhotoRead | None:
        """Upload a photo for a loaded visit and attach it to that visit."""
        owner = self.session.user_id
        if owner is None:
            self.last_error = AuthError(NOT_AUTHENTICATED)
            return None
        if not self._begin("add_photo"):
            return None
        try:
            return await self._add_photo(owner, visit_id, data, file_name, caption, content_type, taken_at, exif)
        finally:
            self._end("add_photo")

    async def _add_photo(
        self,
        owner: UUID,
        visit_id: UUID,
        data: bytes,
        file_name: str,
        caption: str | None,
        content_type: str,
        taken_at: datetime | None,
        exif: dict[str, Any] | None,
    ) -> VisitPhotoRead | None:
        visit = self.get(visit_id)
        if visit is None:
            self._fail(NotFoundError(self.config.messages.not_found))
            return None
        name = PurePosixPath(file_name or "").name
        if not data or not name:
            self._fail(ValidationError("Selecione uma foto para enviar.", field="file"))
            return None

        path = f"{owner}/{visit_id}/{int(time.time() * 1000)}_{name}"
        try:
            await self.storage.upload_object(VISIT_PHOTO_BUCKET, path, data, content_type)
        except RemoteError as e:
            self._fail(e, PHOTO_ERROR)
            return None

        row = {
            "user_id": owner,
            "visit_id": visit_id,
            "file_url": self.storage.get_public_url(VISIT_PHOTO_BUCKET, path),
            "file_path": path,
            "caption": caption,
            "taken_at": taken_at or datetime.now(timezone.utc),
            "exif_json": exif,
        }
        try:
            created = await self.gateway.insert(VISIT_PHOTOS, row)
            photo = VisitPhotoRead.model_validate(created)
        except RemoteError as e:
            try:
                await self.storage.delete_object(VISIT_PHOTO_BUCKET, path)
            except RemoteError as cleanup_error:
                logger.warning("Failed to remove orphaned photo %s: %s", path, cleanup_error.message)
            self._fail(e, PHOTO_ERROR)
            return None

        photos = sorted([*visit.photos, photo], key=lambda p: p.taken_at)
        updated = visit.model_copy(update={"photos": photos})
        self.items = [updated if item.id == visit_id else item for item in self.items]
        self.last_error = None
        self._notify_success(PHOTO_ADDED)
        return photo
