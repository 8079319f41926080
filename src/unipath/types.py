from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

AccountRole = Literal["student", "admin", "agent"]
TriState = bool | None

SECTION_NAMES = (
    "personal",
    "address",
    "background",
    "highest_education",
    "school_history",
    "test_scores",
    "additional",
)


class PersonalInfo(BaseModel):
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    date_of_birth: str | None = None
    first_language: str | None = None
    citizenship: str | None = None
    passport_number: str | None = None
    passport_expiry: str | None = None
    passport_place_of_birth: str | None = None
    gender: str | None = None
    marital_status: str | None = None
    phone: str | None = None
    alternate_email: str | None = None


class Address(BaseModel):
    street: str | None = None
    city: str | None = None
    province: str | None = None
    zip_code: str | None = None
    country: str | None = None


class Background(BaseModel):
    visa_refusal: TriState = None
    has_valid_permit: TriState = None
    permit_details: str | None = None


class HighestEducation(BaseModel):
    country: str | None = None
    level: str | None = None
    grading_scheme: str | None = None
    grade_average: str | None = None
    graduated: TriState = None


class SchoolAddress(BaseModel):
    street: str | None = None
    city: str | None = None
    province: str | None = None
    zip_code: str | None = None


class SchoolRecord(BaseModel):
    country: str | None = None
    name: str | None = None
    level: str | None = None
    grading_scheme: str | None = None
    language: str | None = None
    attended_from: str | None = None
    attended_to: str | None = None
    degree: str | None = None
    graduated: TriState = None
    graduation_date: str | None = None
    certificate_available: TriState = None
    address: SchoolAddress = Field(default_factory=SchoolAddress)


class TestScores(BaseModel):
    proof_available: TriState = None
    conditional_admission: TriState = None
    language_status: str | None = None
    gre_score: str | None = None
    gmat_score: str | None = None
    open_to_language_course: TriState = None
    has_gre_scores: TriState = None
    has_gmat_scores: TriState = None


class AdditionalDetails(BaseModel):
    emergency_contacts: str | None = None
    notes: str | None = None


class ApplicantProfile(BaseModel):
    """Persisted applicant profile.

    A section left as None was never written. School history has no such
    state: an empty list and a never-written history are the same thing.
    """

    personal: PersonalInfo | None = None
    address: Address | None = None
    background: Background | None = None
    highest_education: HighestEducation | None = None
    school_history: list[SchoolRecord] = Field(default_factory=list)
    test_scores: TestScores | None = None
    additional: AdditionalDetails | None = None


# Legacy nested shape produced by PDF extraction. Field names follow the
# application-form PDFs and the client that first consumed them.


class _CandidateModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CandidateAddress(_CandidateModel):
    street: str | None = None
    city: str | None = None
    province: str | None = None
    postal_code: str | None = Field(default=None, alias="postalCode")


class CandidateEducation(_CandidateModel):
    institution: str | None = None
    degree: str | None = None
    from_date: str | None = Field(default=None, alias="fromDate")
    to_date: str | None = Field(default=None, alias="toDate")
    graduated: bool = False


class CandidateTestScores(_CandidateModel):
    gre: bool = False
    gmat: bool = False


class CandidateProfile(_CandidateModel):
    first_name: str | None = Field(default=None, alias="firstName")
    middle_name: str | None = Field(default=None, alias="middleName")
    last_name: str | None = Field(default=None, alias="lastName")
    dob: str | None = None
    first_language: str | None = Field(default=None, alias="firstLanguage")
    country_of_citizenship: str | None = Field(default=None, alias="countryOfCitizenship")
    address: CandidateAddress = Field(default_factory=CandidateAddress)
    education: list[CandidateEducation] = Field(default_factory=list)
    test_scores: CandidateTestScores = Field(default_factory=CandidateTestScores, alias="testScores")

    def is_empty(self) -> bool:
        """True when no labelled field was captured. Presence flags do not count."""
        captured = [
            self.first_name,
            self.middle_name,
            self.last_name,
            self.dob,
            self.first_language,
            self.country_of_citizenship,
            self.address.street,
            self.address.city,
            self.address.province,
            self.address.postal_code,
        ]
        for entry in self.education:
            captured.extend([entry.institution, entry.degree, entry.from_date, entry.to_date])
        return all(value is None for value in captured)
