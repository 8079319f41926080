"""Mapping between the client form payload, the stored profile and the
extracted PDF shape.

Write path: ``apply_client_update`` merges a client payload into a stored
profile section by section. Read path: ``project_for_client`` renders a stored
profile back into the client's field names. ``apply_extracted_profile`` feeds
PDF extraction output through the same write path.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from unipath.types import (
    AdditionalDetails,
    Address,
    ApplicantProfile,
    Background,
    CandidateProfile,
    HighestEducation,
    PersonalInfo,
    SchoolAddress,
    SchoolRecord,
    TestScores,
)


class ProfilePayloadError(ValueError):
    """Raised when a client payload has the wrong structure."""


@dataclass(frozen=True, slots=True)
class Provided:
    value: Any


class _Absent:
    __slots__ = ()

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()
Incoming = Provided | _Absent


def read_field(source: Mapping[str, Any], key: str) -> Incoming:
    """A missing key and an explicit null are both absent; anything else,
    empty string included, was provided."""
    value = source.get(key)
    if value is None:
        return ABSENT
    return Provided(value)


def merge_value(incoming: Incoming, previous: Any) -> Any:
    if isinstance(incoming, Provided):
        return incoming.value
    return previous


def coerce_tri_state(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes"}
    return False


def render_tri_state(value: bool | None) -> str:
    if value is None:
        return ""
    return "Yes" if value else "No"


@dataclass(frozen=True)
class _Section:
    client_key: str
    storage_key: str
    model: type[BaseModel]
    # client field name -> storage field name
    text_fields: dict[str, str]
    flag_fields: dict[str, str] = field(default_factory=dict)
    # flags projected as raw tri-state values instead of Yes/No/""
    raw_flags: frozenset[str] = frozenset()


PERSONAL = _Section(
    client_key="personalInfo",
    storage_key="personal",
    model=PersonalInfo,
    text_fields={
        "firstName": "first_name",
        "middleName": "middle_name",
        "lastName": "last_name",
        "dob": "date_of_birth",
        "firstLanguage": "first_language",
        "citizenship": "citizenship",
        "passportNumber": "passport_number",
        "passportExpiry": "passport_expiry",
        "passportPlaceOfBirth": "passport_place_of_birth",
        "gender": "gender",
        "maritalStatus": "marital_status",
        "phone": "phone",
        "studentEmail": "alternate_email",
    },
)

ADDRESS = _Section(
    client_key="addressDetails",
    storage_key="address",
    model=Address,
    text_fields={
        "street": "street",
        "city": "city",
        "province": "province",
        "postalCode": "zip_code",
        "country": "country",
    },
)

BACKGROUND = _Section(
    client_key="backgroundInfo",
    storage_key="background",
    model=Background,
    text_fields={"permitDetails": "permit_details"},
    flag_fields={"visaRefusal": "visa_refusal", "hasValidPermit": "has_valid_permit"},
)

HIGHEST_EDUCATION = _Section(
    client_key="educationDetails",
    storage_key="highest_education",
    model=HighestEducation,
    text_fields={
        "countryOfEducation": "country",
        "highestLevel": "level",
        "gradingScheme": "grading_scheme",
        "gradeAverage": "grade_average",
    },
    flag_fields={"graduated": "graduated"},
)

TEST_SCORES = _Section(
    client_key="testScores",
    storage_key="test_scores",
    model=TestScores,
    text_fields={
        "languageStatus": "language_status",
        "greScore": "gre_score",
        "gmatScore": "gmat_score",
    },
    flag_fields={
        "proofAvailable": "proof_available",
        "conditionalAdmission": "conditional_admission",
        "openToLanguageCourse": "open_to_language_course",
        "hasGreScores": "has_gre_scores",
        "hasGmatScores": "has_gmat_scores",
    },
    raw_flags=frozenset({"conditional_admission"}),
)

ADDITIONAL = _Section(
    client_key="additionalDetails",
    storage_key="additional",
    model=AdditionalDetails,
    text_fields={"emergencyContacts": "emergency_contacts", "notes": "notes"},
)

SCHOOL = _Section(
    client_key="schoolHistory",
    storage_key="school_history",
    model=SchoolRecord,
    text_fields={
        "country": "country",
        "schoolName": "name",
        "level": "level",
        "gradingScheme": "grading_scheme",
        "language": "language",
        "attendedFrom": "attended_from",
        "attendedTo": "attended_to",
        "degree": "degree",
        "graduationDate": "graduation_date",
    },
    flag_fields={"graduated": "graduated", "certificateAvailable": "certificate_available"},
)

SCHOOL_ADDRESS = _Section(
    client_key="address",
    storage_key="address",
    model=SchoolAddress,
    text_fields={
        "street": "street",
        "city": "city",
        "province": "province",
        "postalCode": "zip_code",
    },
)

_MAPPED_SECTIONS = (PERSONAL, ADDRESS, BACKGROUND, HIGHEST_EDUCATION, TEST_SCORES, ADDITIONAL)

# Key order of the client payload.
_CLIENT_ORDER = (
    "personalInfo",
    "addressDetails",
    "backgroundInfo",
    "educationDetails",
    "schoolHistory",
    "testScores",
    "additionalDetails",
)


def _text_input(source: Mapping[str, Any], key: str) -> Incoming:
    incoming = read_field(source, key)
    if not isinstance(incoming, Provided):
        return incoming
    value = incoming.value
    if isinstance(value, str):
        return incoming
    if isinstance(value, (Mapping, list)):
        raise ProfilePayloadError(f"{key} must be a scalar value")
    if isinstance(value, bool):
        return Provided(render_tri_state(value))
    return Provided(str(value))


def _flag_input(source: Mapping[str, Any], key: str) -> Incoming:
    incoming = read_field(source, key)
    if not isinstance(incoming, Provided):
        return incoming
    coerced = coerce_tri_state(incoming.value)
    if coerced is None:
        return ABSENT
    return Provided(coerced)


def _merge_section(section: _Section, previous: BaseModel | None, source: Any) -> BaseModel | None:
    if not isinstance(source, Mapping):
        raise ProfilePayloadError(f"{section.client_key} must be an object")

    inputs: dict[str, Incoming] = {}
    for client_name, field_name in section.text_fields.items():
        inputs[field_name] = _text_input(source, client_name)
    for client_name, field_name in section.flag_fields.items():
        inputs[field_name] = _flag_input(source, client_name)

    if previous is None and not any(isinstance(value, Provided) for value in inputs.values()):
        # Nothing supplied and nothing stored: the section stays unwritten.
        return None

    values = previous.model_dump() if previous is not None else {}
    for field_name, incoming in inputs.items():
        values[field_name] = merge_value(incoming, values.get(field_name))
    return section.model.model_validate(values)


def _school_record(item: Any) -> SchoolRecord:
    if not isinstance(item, Mapping):
        raise ProfilePayloadError("schoolHistory entries must be objects")
    record = _merge_section(SCHOOL, None, item) or SchoolRecord()
    raw_address = item.get("address")
    if raw_address is not None:
        address = _merge_section(SCHOOL_ADDRESS, None, raw_address)
        if address is not None:
            record = record.model_copy(update={"address": address})
    return record


def present_sections(payload: Mapping[str, Any]) -> list[str]:
    """Storage section names a client payload carries."""
    names = [
        section.storage_key
        for section in _MAPPED_SECTIONS
        if payload.get(section.client_key) is not None
    ]
    if payload.get(SCHOOL.client_key) is not None:
        names.append(SCHOOL.storage_key)
    return names


def apply_client_update(existing: ApplicantProfile, payload: Mapping[str, Any]) -> ApplicantProfile:
    """Merge a client form payload into a stored profile.

    Sections missing from the payload are left untouched. Inside a present
    section a field is only overwritten when the client supplied it (a null
    counts as not supplied), so an empty string clears a text field while an
    empty tri-state answer keeps what was stored. School history is replaced
    wholesale. The input profile is never mutated.
    """
    if not isinstance(payload, Mapping):
        raise ProfilePayloadError("profile payload must be an object")

    updates: dict[str, Any] = {}
    for section in _MAPPED_SECTIONS:
        source = payload.get(section.client_key)
        if source is None:
            continue
        updates[section.storage_key] = _merge_section(
            section, getattr(existing, section.storage_key), source
        )

    history = payload.get(SCHOOL.client_key)
    if history is not None:
        if not isinstance(history, list):
            raise ProfilePayloadError("schoolHistory must be a list")
        updates[SCHOOL.storage_key] = [_school_record(item) for item in history]

    return existing.model_copy(update=updates, deep=True)


def _project_section(section: _Section, model: BaseModel | None) -> dict[str, Any]:
    values = model.model_dump() if model is not None else {}
    projected: dict[str, Any] = {
        client_name: values.get(field_name) for client_name, field_name in section.text_fields.items()
    }
    for client_name, field_name in section.flag_fields.items():
        value = values.get(field_name)
        projected[client_name] = value if field_name in section.raw_flags else render_tri_state(value)
    return projected


def _project_school(record: SchoolRecord) -> dict[str, Any]:
    projected = _project_section(SCHOOL, record)
    projected["address"] = _project_section(SCHOOL_ADDRESS, record.address)
    return projected


def project_for_client(profile: ApplicantProfile) -> dict[str, Any]:
    projected: dict[str, Any] = {
        section.client_key: _project_section(section, getattr(profile, section.storage_key))
        for section in _MAPPED_SECTIONS
    }
    projected[SCHOOL.client_key] = [_project_school(record) for record in profile.school_history]
    return {key: projected[key] for key in _CLIENT_ORDER}


def candidate_to_payload(candidate: CandidateProfile) -> dict[str, Any]:
    """Express extraction output in client field names.

    Only captured values are carried. The school history is included only
    when the extracted education entry has at least one captured text field,
    so an unrecognised PDF never wipes a stored history.
    """
    payload: dict[str, Any] = {
        PERSONAL.client_key: {
            "firstName": candidate.first_name,
            "middleName": candidate.middle_name,
            "lastName": candidate.last_name,
            "dob": candidate.dob,
            "firstLanguage": candidate.first_language,
            "citizenship": candidate.country_of_citizenship,
        },
        ADDRESS.client_key: {
            "street": candidate.address.street,
            "city": candidate.address.city,
            "province": candidate.address.province,
            "postalCode": candidate.address.postal_code,
        },
        TEST_SCORES.client_key: {
            "hasGreScores": candidate.test_scores.gre,
            "hasGmatScores": candidate.test_scores.gmat,
        },
    }

    records = []
    for entry in candidate.education:
        captured = (entry.institution, entry.degree, entry.from_date, entry.to_date)
        if all(value is None for value in captured):
            continue
        records.append(
            {
                "schoolName": entry.institution,
                "degree": entry.degree,
                "attendedFrom": entry.from_date,
                "attendedTo": entry.to_date,
                "graduated": entry.graduated,
            }
        )
    if records:
        payload[SCHOOL.client_key] = records
    return payload


def apply_extracted_profile(existing: ApplicantProfile, candidate: CandidateProfile) -> ApplicantProfile:
    return apply_client_update(existing, candidate_to_payload(candidate))
