from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)

PDF_FIELD_NAME = "profilePdf"
_CHUNK_SIZE = 64 * 1024


class UploadTooLargeError(ValueError):
    def __init__(self, max_bytes: int):
        super().__init__(f"File too large. Maximum size: {max_bytes // (1024 * 1024)}MB")
        self.max_bytes = max_bytes


@dataclass(slots=True)
class StoredUpload:
    path: Path
    size: int
    content_type: str
    filename: str


@contextmanager
def stored_upload(
    stream: BinaryIO,
    upload_dir: Path,
    *,
    filename: str = "",
    content_type: str = "",
    max_bytes: int | None = None,
) -> Iterator[StoredUpload]:
    """Spool an uploaded file to ``upload_dir`` for the duration of the block.

    The file gets a random name and is removed when the block exits whichever
    way it exits. Copying stops at the first chunk past ``max_bytes``.
    """
    upload_dir.mkdir(parents=True, exist_ok=True)
    path = upload_dir / f"{uuid.uuid4().hex}.upload"
    try:
        size = 0
        with path.open("wb") as handle:
            while chunk := stream.read(_CHUNK_SIZE):
                size += len(chunk)
                if max_bytes is not None and size > max_bytes:
                    raise UploadTooLargeError(max_bytes)
                handle.write(chunk)
        yield StoredUpload(path=path, size=size, content_type=content_type, filename=filename)
    finally:
        path.unlink(missing_ok=True)
        logger.debug("Removed temporary upload %s", path.name)
