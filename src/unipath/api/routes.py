from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, File, HTTPException, UploadFile, status
from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from unipath.api.deps import get_current_account, get_db, require_admin
from unipath.api.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UniversityCreate,
    UniversityResponse,
)
from unipath.config import get_settings
from unipath.core.ingestion import ingest_profile_pdf
from unipath.core.normalizer import (
    ProfilePayloadError,
    apply_client_update,
    present_sections,
    project_for_client,
)
from unipath.core.pdf_text import PdfProcessingError
from unipath.core.security import create_access_token, hash_password, resolve_role, verify_password
from unipath.core.uploads import PDF_FIELD_NAME, UploadTooLargeError
from unipath.db.models import Account, University
from unipath.db.repositories import DuplicateEmailError, Repository
from unipath.types import ApplicantProfile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])

_email_adapter = TypeAdapter(EmailStr)


def _auth_response(account: Account) -> AuthResponse:
    return AuthResponse(
        id=account.id,
        name=account.name,
        email=account.email,
        role=account.role,
        token=create_access_token(account.id),
    )


def _account_document(account: Account, profile: ApplicantProfile) -> dict[str, Any]:
    return {
        "_id": account.id,
        "name": account.name,
        "email": account.email,
        "role": account.role,
        **project_for_client(profile),
    }


def _university_response(row: University) -> UniversityResponse:
    return UniversityResponse(
        id=row.id,
        name=row.name,
        country=row.country,
        city=row.city,
        ranking=row.ranking,
        website=row.website,
        course_name=row.course_name,
        course_level=row.course_level,
        duration=row.duration,
        tuition_fee=row.tuition_fee,
        intakes=row.intakes,
        min_cgpa=row.min_cgpa,
        accepted_degrees=row.accepted_degrees,
        accepted_backgrounds=row.accepted_backgrounds,
        max_backlogs=row.max_backlogs,
        gap_accepted=row.gap_accepted,
        gap_limit=row.gap_limit,
        english_tests=row.english_tests,
        min_score_overall=row.min_score_overall,
        min_score_section=row.min_score_section,
        cas_priority=row.cas_priority,
        internal_processing=row.internal_processing,
        tags=row.tags_json,
        created_by=row.created_by,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _account_updates(payload: dict[str, Any]) -> dict[str, str]:
    values: dict[str, str] = {}
    name = payload.get("name")
    if name:
        if not isinstance(name, str):
            raise HTTPException(status_code=400, detail="name must be a string")
        values["name"] = name
    email = payload.get("email")
    if email:
        try:
            values["email"] = _email_adapter.validate_python(email)
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail="Invalid email address") from exc
    return values


@router.post("/auth", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> AuthResponse:
    try:
        role = resolve_role(payload.role, get_settings().default_role)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    repo = Repository(db)
    try:
        account = repo.create_account(
            name=payload.name,
            email=payload.email,
            password_hash=hash_password(payload.password),
            role=role,
        )
    except DuplicateEmailError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    logger.info("Registered account id=%s role=%s", account.id, account.role)
    return _auth_response(account)


@router.post("/auth/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    account = Repository(db).get_account_by_email(payload.email)
    if not account or not verify_password(payload.password, account.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return _auth_response(account)


@router.get("/auth/me")
def get_me(account: Account = Depends(get_current_account), db: Session = Depends(get_db)) -> dict:
    profile = Repository(db).get_applicant_profile(account.id)
    return _account_document(account, profile)


@router.put("/auth/profile")
def update_profile(
    payload: dict[str, Any] = Body(...),
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> dict:
    repo = Repository(db)
    try:
        profile = apply_client_update(repo.get_applicant_profile(account.id), payload)
    except ProfilePayloadError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    account_values = _account_updates(payload)
    if account_values:
        try:
            repo.update_account_fields(account.id, account_values, commit=False)
        except DuplicateEmailError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    sections = present_sections(payload)
    repo.save_profile_sections(account.id, profile, sections)
    logger.info("Profile updated account_id=%s sections=%s", account.id, ",".join(sections))
    return {**_account_document(account, profile), "message": "Profile updated successfully"}


@router.put("/auth/profile/upload-pdf")
def upload_profile_pdf(
    profile_pdf: UploadFile | None = File(None, alias=PDF_FIELD_NAME),
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> dict:
    if profile_pdf is None:
        raise HTTPException(status_code=400, detail="Please upload a PDF file")

    settings = get_settings()
    try:
        profile = ingest_profile_pdf(
            Repository(db),
            account.id,
            profile_pdf.file,
            upload_dir=settings.upload_dir,
            max_bytes=settings.max_upload_bytes,
            filename=profile_pdf.filename or "",
            content_type=profile_pdf.content_type or "",
        )
    except UploadTooLargeError as exc:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(exc)) from exc
    except PdfProcessingError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Error processing PDF file: {exc}",
        ) from exc

    return _account_document(account, profile)


@router.get("/universities", response_model=list[UniversityResponse])
def list_universities(db: Session = Depends(get_db)) -> list[UniversityResponse]:
    return [_university_response(row) for row in Repository(db).list_universities()]


@router.post("/universities", response_model=UniversityResponse, status_code=status.HTTP_201_CREATED)
def create_university(
    payload: UniversityCreate,
    account: Account = Depends(require_admin),
    db: Session = Depends(get_db),
) -> UniversityResponse:
    university = Repository(db).create_university(payload.model_dump(), created_by=account.id)
    logger.info("University created id=%s by account_id=%s", university.id, account.id)
    return _university_response(university)
