from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from unipath.db.base import Base
from unipath.db.models import SECTION_MODELS, Account, SchoolHistoryEntry, University
from unipath.types import (
    AdditionalDetails,
    Address,
    ApplicantProfile,
    Background,
    HighestEducation,
    PersonalInfo,
    SchoolAddress,
    SchoolRecord,
    TestScores,
)

SECTION_TYPES = {
    "personal": PersonalInfo,
    "address": Address,
    "background": Background,
    "highest_education": HighestEducation,
    "test_scores": TestScores,
    "additional": AdditionalDetails,
}

_SCHOOL_ADDRESS_PREFIX = "address_"


class DuplicateEmailError(ValueError):
    def __init__(self, email: str):
        super().__init__("User already exists")
        self.email = email


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _school_row_to_record(row: SchoolHistoryEntry) -> SchoolRecord:
    address = SchoolAddress(
        **{name: getattr(row, _SCHOOL_ADDRESS_PREFIX + name) for name in SchoolAddress.model_fields}
    )
    values = {name: getattr(row, name) for name in SchoolRecord.model_fields if name != "address"}
    return SchoolRecord(**values, address=address)


def _school_record_to_values(record: SchoolRecord) -> dict[str, Any]:
    values = record.model_dump(exclude={"address"})
    for name, value in record.address.model_dump().items():
        values[_SCHOOL_ADDRESS_PREFIX + name] = value
    return values


class Repository:
    def __init__(self, session: Session):
        self.session = session

    def create_account(self, name: str, email: str, password_hash: str, role: str) -> Account:
        email = normalize_email(email)
        if self.get_account_by_email(email):
            raise DuplicateEmailError(email)
        account = Account(name=name, email=email, password_hash=password_hash, role=role)
        self.session.add(account)
        try:
            self.session.commit()
        except IntegrityError as exc:
            # Lost a race on the unique email index.
            self.session.rollback()
            raise DuplicateEmailError(email) from exc
        self.session.refresh(account)
        return account

    def get_account(self, account_id: int) -> Account | None:
        return self.session.get(Account, account_id)

    def get_account_by_email(self, email: str) -> Account | None:
        return self.session.scalar(select(Account).where(Account.email == normalize_email(email)))

    def list_accounts(self) -> list[Account]:
        return list(self.session.scalars(select(Account).order_by(Account.id)).all())

    def update_account_fields(self, account_id: int, values: dict[str, Any], commit: bool = True) -> Account:
        account = self.session.get(Account, account_id)
        if not account:
            raise LookupError(f"account {account_id} not found")

        if "email" in values:
            email = normalize_email(values["email"])
            existing = self.get_account_by_email(email)
            if existing and existing.id != account_id:
                raise DuplicateEmailError(email)
            values = {**values, "email": email}

        for key, value in values.items():
            setattr(account, key, value)
        try:
            self.session.flush()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateEmailError(values.get("email", account.email)) from exc
        if commit:
            self.session.commit()
            self.session.refresh(account)
        return account

    def get_applicant_profile(self, account_id: int) -> ApplicantProfile:
        sections: dict[str, Any] = {}
        for name, model in SECTION_MODELS.items():
            row = self.session.scalar(select(model).where(model.account_id == account_id))
            if row is None:
                continue
            section_type = SECTION_TYPES[name]
            sections[name] = section_type(**{field: getattr(row, field) for field in section_type.model_fields})

        rows = self.session.scalars(
            select(SchoolHistoryEntry)
            .where(SchoolHistoryEntry.account_id == account_id)
            .order_by(SchoolHistoryEntry.sort_order, SchoolHistoryEntry.id)
        ).all()
        sections["school_history"] = [_school_row_to_record(row) for row in rows]
        return ApplicantProfile(**sections)

    def save_profile_sections(
        self,
        account_id: int,
        profile: ApplicantProfile,
        sections: Iterable[str],
    ) -> None:
        """Write the named sections of ``profile`` in one transaction.

        Sections not named are not touched, and a section that is still None
        on the profile has nothing to write. On failure nothing is committed.
        """
        try:
            for name in sections:
                if name == "school_history":
                    self._replace_school_history(account_id, profile.school_history)
                    continue
                section = getattr(profile, name)
                if section is None:
                    continue
                self._upsert_section(SECTION_MODELS[name], account_id, section.model_dump())
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def _upsert_section(self, model: type[Base], account_id: int, values: dict[str, Any]) -> None:
        existing = self.session.scalar(select(model).where(model.account_id == account_id))
        if existing:
            for key, value in values.items():
                setattr(existing, key, value)
        else:
            self.session.add(model(account_id=account_id, **values))

    def _replace_school_history(self, account_id: int, records: list[SchoolRecord]) -> None:
        self.session.execute(delete(SchoolHistoryEntry).where(SchoolHistoryEntry.account_id == account_id))
        for index, record in enumerate(records):
            self.session.add(
                SchoolHistoryEntry(account_id=account_id, sort_order=index, **_school_record_to_values(record))
            )

    def create_university(self, values: dict[str, Any], created_by: int | None) -> University:
        values = dict(values)
        tags = values.pop("tags", None) or []
        university = University(**values, tags_json=list(tags), created_by=created_by)
        self.session.add(university)
        self.session.commit()
        self.session.refresh(university)
        return university

    def list_universities(self) -> list[University]:
        return list(self.session.scalars(select(University).order_by(University.id)).all())
