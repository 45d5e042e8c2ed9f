"""Tests for the PDF library hook."""

from datetime import datetime, timezone

import pytest

from agrostudy.errors import GatewayError, ValidationError
from agrostudy.gateway.base import PDF_BUCKET, PDF_LIBRARY
from agrostudy.hooks import PdfLibraryHook

METADATA = {
    "title": "Manual de Solos",
    "author": "Embrapa",
    "category": "Solos",
    "tags": "solo, fertilidade, solo",
}


@pytest.fixture
async def library(session, gateway, storage, notifier) -> PdfLibraryHook:
    return await PdfLibraryHook(session, gateway, storage, notifier).mount()


async def test_upload_stores_object_then_row(library, session, storage, notifier, pdf_bytes):
    pdf = await library.upload(pdf_bytes, "manual.pdf", METADATA)

    assert pdf is not None
    assert pdf.file_name == "manual.pdf"
    assert pdf.file_path.startswith(f"{session.user_id}/")
    assert pdf.file_size == len(pdf_bytes)
    assert pdf.tags == ["solo", "fertilidade"]
    assert pdf.description == "Material de estudo sobre solos"
    assert pdf.favorite is False
    assert storage.objects[(PDF_BUCKET, pdf.file_path)] == pdf_bytes
    assert library.get_pdf_url(pdf) == f"memory://storage/{PDF_BUCKET}/{pdf.file_path}"
    assert notifier.last.description == "PDF enviado com sucesso!"


async def test_upload_rejects_non_pdf(library, gateway, storage):
    assert await library.upload(b"not a pdf", "notas.pdf", METADATA) is None

    assert isinstance(library.last_error, ValidationError)
    assert storage.objects == {}
    assert gateway.count("insert") == 0


async def test_upload_rejects_oversized_file(session, gateway, storage, notifier, pdf_bytes):
    library = await PdfLibraryHook(session, gateway, storage, notifier, max_size_bytes=10).mount()

    assert await library.upload(pdf_bytes, "manual.pdf", METADATA) is None

    assert library.last_error.field == "file"
    assert storage.objects == {}


async def test_upload_requires_metadata(library, storage, pdf_bytes):
    assert await library.upload(pdf_bytes, "manual.pdf", {**METADATA, "author": ""}) is None

    assert library.last_error.field == "author"
    assert storage.objects == {}


async def test_failed_row_insert_removes_orphan_object(library, gateway, storage, notifier, pdf_bytes):
    gateway.fail_on("insert")

    assert await library.upload(pdf_bytes, "manual.pdf", METADATA) is None

    assert isinstance(library.last_error, GatewayError)
    assert storage.objects == {}
    assert library.items == []
    assert notifier.last.description == "Erro ao fazer upload do PDF"


async def test_toggle_favorite(library, notifier, pdf_bytes):
    pdf = await library.upload(pdf_bytes, "manual.pdf", METADATA)

    assert await library.toggle_favorite(pdf.id)
    assert library.get(pdf.id).favorite is True
    assert notifier.last.title == "Adicionado aos favoritos"
    assert notifier.last.description == "Manual de Solos"

    assert await library.toggle_favorite(pdf.id)
    assert library.get(pdf.id).favorite is False
    assert notifier.last.title == "Removido dos favoritos"


async def test_delete_removes_object_and_row(library, session, gateway, storage, pdf_bytes):
    pdf = await library.upload(pdf_bytes, "manual.pdf", METADATA)

    assert await library.delete(pdf.id)

    assert storage.objects == {}
    assert await gateway.fetch_all(PDF_LIBRARY, session.user_id) == []


async def test_delete_proceeds_when_object_is_already_gone(library, storage, pdf_bytes):
    pdf = await library.upload(pdf_bytes, "manual.pdf", METADATA)
    storage.objects.clear()

    assert await library.delete(pdf.id)
    assert library.items == []


async def test_filter_and_categories(library, pdf_bytes):
    solos = await library.upload(pdf_bytes, "solos.pdf", METADATA)
    pragas = await library.upload(
        pdf_bytes, "mip.pdf", {"title": "Manejo Integrado", "author": "Prof. Carlos", "category": "Entomologia"}
    )
    await library.toggle_favorite(pragas.id)

    assert library.filter(category="Solos") == [solos]
    assert [p.id for p in library.filter(query="carlos")] == [pragas.id]
    assert [p.id for p in library.filter(query="fertilidade")] == [solos.id]
    assert [p.id for p in library.filter(favorites_only=True)] == [pragas.id]
    assert len(library.filter()) == 2


def test_categories_start_with_all():
    class Named:
        def __init__(self, name):
            self.name = name

    assert PdfLibraryHook.get_categories([Named("Solos"), Named("Zootecnia")]) == ["all", "Solos", "Zootecnia"]


async def test_stats(library, pdf_bytes):
    pdf = await library.upload(pdf_bytes, "manual.pdf", METADATA)
    await library.toggle_favorite(pdf.id)

    stats = library.stats(datetime.now(timezone.utc))

    assert stats.total_pdfs == 1
    assert stats.favorites == 1
    assert stats.this_month == 1
    assert stats.total_size.endswith("MB")


async def test_failed_row_delete_keeps_document(library, gateway, notifier, pdf_bytes):
    pdf = await library.upload(pdf_bytes, "manual.pdf", METADATA)
    now = datetime.now(timezone.utc)
    before = library.stats(now)
    gateway.fail_on("delete")

    assert not await library.delete(pdf.id)

    assert isinstance(library.last_error, GatewayError)
    assert [p.id for p in library.items] == [pdf.id]
    assert library.stats(now) == before
    assert notifier.last.level == "error"


async def test_upload_rejects_non_string_tags(library, storage, pdf_bytes):
    assert await library.upload(pdf_bytes, "manual.pdf", {**METADATA, "tags": ["solo", 3]}) is None

    assert library.last_error.field == "tags"
    assert storage.objects == {}
