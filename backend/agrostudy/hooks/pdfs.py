"""PDF library hook."""

import logging
import time
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any
from uuid import UUID

from agrostudy.config import get_settings
from agrostudy.errors import AuthError, NotFoundError, RemoteError, ValidationError
from agrostudy.gateway.base import PDF_BUCKET, PDF_LIBRARY, ObjectStorage, OrderBy, RemoteDataGateway
from agrostudy.hooks.resource import (
    NOT_AUTHENTICATED,
    HookMessages,
    Message,
    ResourceConfig,
    ResourceHook,
    parse_input,
)
from agrostudy.notifications import Notifier
from agrostudy.schemas.pdfs import (
    PdfDocumentCreate,
    PdfDocumentRead,
    PdfDocumentUpdate,
    PdfStats,
    PdfUploadMetadata,
)
from agrostudy.schemas.subjects import SubjectRead
from agrostudy.services.pdf_processor import PDFProcessor, pdf_processor
from agrostudy.services.stats import MB, pdf_stats
from agrostudy.session import Session

logger = logging.getLogger(__name__)

PDF_CONFIG = ResourceConfig(
    entity="pdf",
    collection=PDF_LIBRARY,
    read_schema=PdfDocumentRead,
    create_schema=PdfDocumentCreate,
    update_schema=PdfDocumentUpdate,
    order_by=(OrderBy("created_at", descending=True),),
    messages=HookMessages(
        load_error=Message("Erro", "Erro ao carregar biblioteca de PDFs"),
        created=Message("Sucesso", "PDF enviado com sucesso!"),
        create_error=Message("Erro", "Erro ao fazer upload do PDF"),
        updated=Message("Sucesso", "PDF atualizado com sucesso!"),
        update_error=Message("Erro", "Erro ao atualizar PDF"),
        deleted=Message("PDF removido", "O arquivo foi removido da biblioteca"),
        delete_error=Message("Erro", "Erro ao remover PDF"),
        not_found="PDF não encontrado.",
    ),
)

FAVORITE_ADDED = Message("Adicionado aos favoritos", "{title}")
FAVORITE_REMOVED = Message("Removido dos favoritos", "{title}")
FAVORITE_ERROR = Message("Erro", "Erro ao atualizar favoritos")

ALL_CATEGORIES = "all"


def default_description(category: str) -> str:
    return f"Material de estudo sobre {category.lower()}"


class PdfLibraryHook(ResourceHook[PdfDocumentRead]):
    """
    PDF documents of the current identity, newest first.

    The payload lives in object storage; the hook keeps the metadata rows.
    Uploads store the object before inserting the row, deletes remove the
    object (best effort) before deleting the row.
    """

    config = PDF_CONFIG

    def __init__(
        self,
        session: Session,
        gateway: RemoteDataGateway,
        storage: ObjectStorage,
        notifier: Notifier | None = None,
        processor: PDFProcessor = pdf_processor,
        max_size_bytes: int | None = None,
    ):
        super().__init__(session, gateway, notifier)
        self.storage = storage
        self.processor = processor
        self.max_size_bytes = max_size_bytes or get_settings().max_pdf_size_bytes

    def stats(self, now: datetime | None = None) -> PdfStats:
        return pdf_stats(self.items, now or datetime.now(timezone.utc))

    def get_pdf_url(self, pdf: PdfDocumentRead) -> str:
        return self.storage.get_public_url(PDF_BUCKET, pdf.file_path)

    @staticmethod
    def get_categories(subjects: Iterable[SubjectRead]) -> list[str]:
        return [ALL_CATEGORIES, *(subject.name for subject in subjects)]

    def filter(
        self,
        category: str = ALL_CATEGORIES,
        query: str = "",
        favorites_only: bool = False,
    ) -> list[PdfDocumentRead]:
        """Library view filtered by category, free text and favorite flag."""
        needle = query.strip().lower()
        result = []
        for pdf in self.items:
            if category != ALL_CATEGORIES and pdf.category != category:
                continue
            if favorites_only and not pdf.favorite:
                continue
            if needle and not (
                needle in pdf.title.lower()
                or needle in pdf.author.lower()
                or any(needle in tag.lower() for tag in pdf.tags)
            ):
                continue
            result.append(pdf)
        return result

    async def upload(self, data: bytes, file_name: str, metadata: PdfUploadMetadata | dict[str, Any]) -> PdfDocumentRead | None:
        """Store a PDF payload and create its library row."""
        owner = self.session.user_id
        if owner is None:
            self.last_error = AuthError(NOT_AUTHENTICATED)
            return None
        if not self._begin("upload"):
            return None
        try:
            return await self._upload(owner, data, file_name, metadata)
        finally:
            self._end("upload")

    async def _upload(self, owner: UUID, data: bytes, file_name: str, metadata: Any) -> PdfDocumentRead | None:
        try:
            meta = parse_input(PdfUploadMetadata, metadata)
            name = PurePosixPath(file_name or "").name
            if not data or not name:
                raise ValidationError("Selecione um arquivo PDF.", field="file")
            if len(data) > self.max_size_bytes:
                raise ValidationError(
                    f"O arquivo excede o tamanho máximo de {self.max_size_bytes // MB} MB.",
                    field="file",
                )
            pages = await self.processor.count_pages(data)
            if not pages:
                raise ValidationError("O arquivo enviado não é um PDF válido.", field="file")
        except ValidationError as e:
            self._fail(e)
            return None

        logger.info("Accepted %s: %d pages, %d bytes", name, pages, len(data))

        path = f"{owner}/{int(time.time() * 1000)}_{name}"
        try:
            await self.storage.upload_object(PDF_BUCKET, path, data, "application/pdf")
        except RemoteError as e:
            self._fail(e, self.config.messages.create_error)
            return None

        row = PdfDocumentCreate(
            title=meta.title,
            author=meta.author,
            file_name=name,
            file_path=path,
            file_size=len(data),
            category=meta.category,
            tags=meta.tags,
            description=meta.description or default_description(meta.category),
        )
        record = await self._create(owner, row)
        if record is None:
            try:
                await self.storage.delete_object(PDF_BUCKET, path)
            except RemoteError as e:
                logger.warning("Failed to remove orphaned PDF object %s: %s", path, e.message)
        return record

    async def delete_remote(self, current: PdfDocumentRead, owner: UUID) -> None:
        try:
            await self.storage.delete_object(PDF_BUCKET, current.file_path)
        except RemoteError as e:
            logger.error("Storage deletion failed for %s: %s", current.file_path, e.message)
        await super().delete_remote(current, owner)

    async def toggle_favorite(self, id: UUID) -> bool:
        owner = self.session.user_id
        if owner is None:
            self.last_error = AuthError(NOT_AUTHENTICATED)
            return False
        current = self.get(id)
        if current is None:
            self._fail(NotFoundError(self.config.messages.not_found))
            return False
        if not self._begin("favorite"):
            return False
        favorite = not current.favorite
        try:
            return await self._update(
                owner,
                id,
                {"favorite": favorite},
                FAVORITE_ADDED if favorite else FAVORITE_REMOVED,
                FAVORITE_ERROR,
            )
        finally:
            self._end("favorite")
