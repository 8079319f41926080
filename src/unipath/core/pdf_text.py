from __future__ import annotations

import logging
from pathlib import Path

from PyPDF2 import PdfReader

logger = logging.getLogger(__name__)


class PdfProcessingError(Exception):
    """The document could not be turned into profile data."""


def extract_pdf_text(path: Path) -> str:
    """Return the text of every page, joined by newlines.

    Any reader failure surfaces as a single PdfProcessingError; partial text
    from a document that breaks halfway through is never returned.
    """
    try:
        reader = PdfReader(str(path))
        parts = [page.extract_text() or "" for page in reader.pages]
    except Exception as exc:
        logger.warning("PDF text extraction failed path=%s error=%s", path.name, exc)
        raise PdfProcessingError(f"unreadable PDF document: {exc}") from exc
    return "\n".join(parts)
