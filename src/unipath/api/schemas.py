from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)
    role: str | None = None


class LoginRequest(BaseModel):
    # Plain str: a malformed email must fail like any other bad credential.
    email: str
    password: str


class AuthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(alias="_id")
    name: str
    email: str
    role: str
    token: str


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UniversityCreate(_CamelModel):
    name: str = Field(min_length=1)
    country: str = Field(min_length=1)
    city: str = Field(min_length=1)
    ranking: str | None = None
    website: str | None = None

    course_name: str = Field(min_length=1)
    course_level: str = Field(min_length=1)
    duration: str | None = None
    tuition_fee: str | None = None
    intakes: str | None = None

    min_cgpa: str | None = None
    accepted_degrees: str | None = None
    accepted_backgrounds: str | None = None
    max_backlogs: int | None = None
    gap_accepted: Literal["Yes", "No"] = "No"
    gap_limit: int | None = None

    english_tests: str | None = None
    min_score_overall: str | None = None
    min_score_section: str | None = None

    cas_priority: str | None = None
    internal_processing: str | None = None
    tags: list[str] = Field(default_factory=list)


class UniversityResponse(UniversityCreate):
    id: int = Field(alias="_id")
    created_by: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
