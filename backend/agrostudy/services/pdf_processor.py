"""PDF validation service using PyMuPDF."""

import logging

import pymupdf  # PyMuPDF

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"


class PDFProcessor:
    """Checks uploaded payloads before they reach object storage."""

    @staticmethod
    async def count_pages(pdf_bytes: bytes) -> int:
        """
        Number of pages in a PDF payload, or 0 if it is not a readable PDF.

        The magic header is checked first so arbitrary uploads (images,
        text) never reach the parser.
        """
        if not pdf_bytes.lstrip()[:5].startswith(PDF_MAGIC):
            return 0
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:
                return doc.page_count
        except Exception as e:
            logger.info("Rejected PDF payload: %s", e)
            return 0


# Singleton instance
pdf_processor = PDFProcessor()
