from __future__ import annotations

from pathlib import Path

import pytest

from unipath.core.pdf_text import PdfProcessingError, extract_pdf_text


def test_corrupt_document_raises_processing_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"this is not a pdf at all")

    with pytest.raises(PdfProcessingError):
        extract_pdf_text(path)


def test_missing_document_raises_processing_error(tmp_path: Path) -> None:
    with pytest.raises(PdfProcessingError):
        extract_pdf_text(tmp_path / "absent.pdf")
