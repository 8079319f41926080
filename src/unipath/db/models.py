from __future__ import annotations

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from unipath.db.base import Base, TimestampMixin


class Account(TimestampMixin, Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), default="student", nullable=False)


class ProfilePersonal(TimestampMixin, Base):
    __tablename__ = "profile_personal"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id", ondelete="CASCADE"), unique=True)
    first_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    middle_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    date_of_birth: Mapped[str | None] = mapped_column(String(32), nullable=True)
    first_language: Mapped[str | None] = mapped_column(String(120), nullable=True)
    citizenship: Mapped[str | None] = mapped_column(String(120), nullable=True)
    passport_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    passport_expiry: Mapped[str | None] = mapped_column(String(32), nullable=True)
    passport_place_of_birth: Mapped[str | None] = mapped_column(String(255), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(40), nullable=True)
    marital_status: Mapped[str | None] = mapped_column(String(40), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    alternate_email: Mapped[str | None] = mapped_column(String(255), nullable=True)


class ProfileAddress(TimestampMixin, Base):
    __tablename__ = "profile_addresses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id", ondelete="CASCADE"), unique=True)
    street: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    province: Mapped[str | None] = mapped_column(String(120), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(30), nullable=True)
    country: Mapped[str | None] = mapped_column(String(120), nullable=True)


class ProfileBackground(TimestampMixin, Base):
    __tablename__ = "profile_backgrounds"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id", ondelete="CASCADE"), unique=True)
    visa_refusal: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    has_valid_permit: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    permit_details: Mapped[str | None] = mapped_column(Text, nullable=True)


class ProfileHighestEducation(TimestampMixin, Base):
    __tablename__ = "profile_highest_education"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id", ondelete="CASCADE"), unique=True)
    country: Mapped[str | None] = mapped_column(String(120), nullable=True)
    level: Mapped[str | None] = mapped_column(String(120), nullable=True)
    grading_scheme: Mapped[str | None] = mapped_column(String(120), nullable=True)
    grade_average: Mapped[str | None] = mapped_column(String(40), nullable=True)
    graduated: Mapped[bool | None] = mapped_column(Boolean, nullable=True)


class SchoolHistoryEntry(TimestampMixin, Base):
    __tablename__ = "school_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id", ondelete="CASCADE"), index=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    country: Mapped[str | None] = mapped_column(String(120), nullable=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    level: Mapped[str | None] = mapped_column(String(120), nullable=True)
    grading_scheme: Mapped[str | None] = mapped_column(String(120), nullable=True)
    language: Mapped[str | None] = mapped_column(String(120), nullable=True)
    attended_from: Mapped[str | None] = mapped_column(String(32), nullable=True)
    attended_to: Mapped[str | None] = mapped_column(String(32), nullable=True)
    degree: Mapped[str | None] = mapped_column(String(255), nullable=True)
    graduated: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    graduation_date: Mapped[str | None] = mapped_column(String(32), nullable=True)
    certificate_available: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    address_street: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address_city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    address_province: Mapped[str | None] = mapped_column(String(120), nullable=True)
    address_zip_code: Mapped[str | None] = mapped_column(String(30), nullable=True)


class ProfileTestScores(TimestampMixin, Base):
    __tablename__ = "profile_test_scores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id", ondelete="CASCADE"), unique=True)
    proof_available: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    conditional_admission: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    language_status: Mapped[str | None] = mapped_column(String(120), nullable=True)
    gre_score: Mapped[str | None] = mapped_column(String(40), nullable=True)
    gmat_score: Mapped[str | None] = mapped_column(String(40), nullable=True)
    open_to_language_course: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    has_gre_scores: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    has_gmat_scores: Mapped[bool | None] = mapped_column(Boolean, nullable=True)


class ProfileAdditional(TimestampMixin, Base):
    __tablename__ = "profile_additional"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id", ondelete="CASCADE"), unique=True)
    emergency_contacts: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class University(TimestampMixin, Base):
    __tablename__ = "universities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    country: Mapped[str] = mapped_column(String(120), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False)
    ranking: Mapped[str | None] = mapped_column(String(80), nullable=True)
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)

    course_name: Mapped[str] = mapped_column(String(255), nullable=False)
    course_level: Mapped[str] = mapped_column(String(120), nullable=False)
    duration: Mapped[str | None] = mapped_column(String(80), nullable=True)
    tuition_fee: Mapped[str | None] = mapped_column(String(80), nullable=True)
    intakes: Mapped[str | None] = mapped_column(String(255), nullable=True)

    min_cgpa: Mapped[str | None] = mapped_column(String(40), nullable=True)
    accepted_degrees: Mapped[str | None] = mapped_column(Text, nullable=True)
    accepted_backgrounds: Mapped[str | None] = mapped_column(Text, nullable=True)
    max_backlogs: Mapped[int | None] = mapped_column(Integer, nullable=True)
    gap_accepted: Mapped[str] = mapped_column(String(3), default="No", nullable=False)
    gap_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)

    english_tests: Mapped[str | None] = mapped_column(String(255), nullable=True)
    min_score_overall: Mapped[str | None] = mapped_column(String(40), nullable=True)
    min_score_section: Mapped[str | None] = mapped_column(String(40), nullable=True)

    cas_priority: Mapped[str | None] = mapped_column(String(120), nullable=True)
    internal_processing: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tags_json: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    created_by: Mapped[int | None] = mapped_column(
        ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True, index=True
    )


SECTION_MODELS: dict[str, type[Base]] = {
    "personal": ProfilePersonal,
    "address": ProfileAddress,
    "background": ProfileBackground,
    "highest_education": ProfileHighestEducation,
    "test_scores": ProfileTestScores,
    "additional": ProfileAdditional,
}
