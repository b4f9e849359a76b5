"""PDF text extraction using pypdf."""

import io
import logging

from pypdf import PdfReader

logger = logging.getLogger(__name__)


class ExtractionError(Exception):
    """Raised when text cannot be extracted from a document."""

    pass


def extract_text_from_pdf(data: bytes) -> str:
    """Extract text from in-memory PDF bytes.

    Best-effort: scanned or image-only pages yield no text (no OCR).

    Args:
        data: Raw PDF file contents

    Returns:
        Text of all pages, separated by blank lines

    Raises:
        ExtractionError: If the bytes are not a readable PDF
    """
    if not data:
        raise ExtractionError("Empty file")

    try:
        reader = PdfReader(io.BytesIO(data))
        text_parts = []
        for page in reader.pages:
            page_text = page.extract_text() or ""
            if page_text.strip():
                text_parts.append(page_text)
    except Exception as e:
        raise ExtractionError(f"Failed to extract text from PDF: {e}") from e

    if not text_parts:
        logger.warning("No text extracted from PDF (may be image-based)")
        return ""

    return "\n\n".join(text_parts)


def truncate_document(text: str, max_chars: int) -> str:
    """Cap document text to bound downstream cost and latency."""
    return text[:max_chars]
