"""API routes for the PDF library."""

import logging
from uuid import UUID

from fastapi import APIRouter, File, Form, UploadFile, status

from agrostudy.api.deps import CurriculumDep, Notifications, PdfsDep, get_or_404, raise_for_hook
from agrostudy.schemas.pdfs import PdfDocumentRead, PdfDocumentUpdate, PdfStats, PdfUrlResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pdfs", tags=["pdfs"])


# =============================================================================
# LIBRARY
# =============================================================================


@router.get("/", response_model=list[PdfDocumentRead])
async def list_pdfs(
    hook: PdfsDep,
    category: str = "all",
    q: str = "",
    favorites: bool = False,
) -> list[PdfDocumentRead]:
    """
    List PDFs, newest first.

    Filters:
    - category: "all" or a category name
    - q: Search in title, author and tags
    - favorites: Only favorites
    """
    return hook.filter(category=category, query=q, favorites_only=favorites)


@router.get("/stats", response_model=PdfStats)
async def get_pdf_stats(hook: PdfsDep) -> PdfStats:
    return hook.stats()


@router.get("/categories", response_model=list[str])
async def get_pdf_categories(hook: PdfsDep, curriculum: CurriculumDep) -> list[str]:
    """'all' followed by the user's subject names."""
    return hook.get_categories(curriculum.subjects.items)


# =============================================================================
# PDF UPLOAD
# =============================================================================


@router.post("/", response_model=PdfDocumentRead, status_code=status.HTTP_201_CREATED)
async def upload_pdf(
    hook: PdfsDep,
    notifier: Notifications,
    file: UploadFile = File(...),
    title: str = Form(...),
    author: str = Form(...),
    category: str = Form(...),
    tags: str = Form(""),
    description: str | None = Form(None),
) -> PdfDocumentRead:
    """
    Upload a PDF (multipart) with its metadata.

    Tags are a comma-separated string. The file is validated, stored in
    object storage, and then recorded in the library.
    """
    data = await file.read()
    logger.info("Received %d bytes for %s", len(data), file.filename)
    pdf = await hook.upload(
        data,
        file.filename or "",
        {
            "title": title,
            "author": author,
            "category": category,
            "tags": tags,
            "description": description or None,
        },
    )
    if pdf is None:
        raise_for_hook(hook, notifier)
    return pdf


# =============================================================================
# SINGLE DOCUMENT
# =============================================================================


@router.get("/{pdf_id}", response_model=PdfDocumentRead)
async def get_pdf(pdf_id: UUID, hook: PdfsDep) -> PdfDocumentRead:
    return get_or_404(hook, pdf_id)


@router.get("/{pdf_id}/url", response_model=PdfUrlResponse)
async def get_pdf_url(pdf_id: UUID, hook: PdfsDep) -> PdfUrlResponse:
    """Public URL of the stored file, for viewing or download."""
    pdf = get_or_404(hook, pdf_id)
    return PdfUrlResponse(url=hook.get_pdf_url(pdf), file_name=pdf.file_name)


@router.patch("/{pdf_id}", response_model=PdfDocumentRead)
async def update_pdf(pdf_id: UUID, data: PdfDocumentUpdate, hook: PdfsDep, notifier: Notifications) -> PdfDocumentRead:
    if not await hook.update(pdf_id, data):
        raise_for_hook(hook, notifier)
    return hook.get(pdf_id)


@router.post("/{pdf_id}/favorite", response_model=PdfDocumentRead)
async def toggle_favorite(pdf_id: UUID, hook: PdfsDep, notifier: Notifications) -> PdfDocumentRead:
    if not await hook.toggle_favorite(pdf_id):
        raise_for_hook(hook, notifier)
    return hook.get(pdf_id)


@router.delete("/{pdf_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pdf(pdf_id: UUID, hook: PdfsDep, notifier: Notifications) -> None:
    """Delete the stored file (best effort) and the library entry."""
    if not await hook.delete(pdf_id):
        raise_for_hook(hook, notifier)
