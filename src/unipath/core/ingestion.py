from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from unipath.core.extractor import extract
from unipath.core.normalizer import apply_extracted_profile, candidate_to_payload, present_sections
from unipath.core.pdf_text import PdfProcessingError, extract_pdf_text
from unipath.core.uploads import stored_upload
from unipath.db.repositories import Repository
from unipath.types import ApplicantProfile

logger = logging.getLogger(__name__)


def ingest_profile_pdf(
    repo: Repository,
    account_id: int,
    stream: BinaryIO,
    *,
    upload_dir: Path,
    max_bytes: int | None = None,
    filename: str = "",
    content_type: str = "",
) -> ApplicantProfile:
    """Spool an uploaded application PDF, extract it and merge it into the
    account's stored profile.

    The spooled file is removed on every exit path. A document with no
    recognisable labelled field is rejected rather than merged.
    """
    with stored_upload(
        stream,
        upload_dir,
        filename=filename,
        content_type=content_type,
        max_bytes=max_bytes,
    ) as stored:
        text = extract_pdf_text(stored.path)
        candidate = extract(text)
        if candidate.is_empty():
            logger.warning("No profile fields recognised in upload file=%s size=%s", filename, stored.size)
            raise PdfProcessingError("no recognizable profile fields")

        sections = present_sections(candidate_to_payload(candidate))
        profile = apply_extracted_profile(repo.get_applicant_profile(account_id), candidate)
        repo.save_profile_sections(account_id, profile, sections)

    logger.info("Profile ingested from PDF account_id=%s sections=%s", account_id, ",".join(sections))
    return profile
