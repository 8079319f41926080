from __future__ import annotations

import pytest

from unipath.core.extractor import extract
from unipath.core.normalizer import (
    ABSENT,
    ProfilePayloadError,
    Provided,
    apply_client_update,
    apply_extracted_profile,
    coerce_tri_state,
    present_sections,
    project_for_client,
    read_field,
)
from unipath.types import (
    AdditionalDetails,
    Address,
    ApplicantProfile,
    Background,
    HighestEducation,
    PersonalInfo,
    SchoolAddress,
    SchoolRecord,
    TestScores as ScoreSection,
)

from tests.helpers import APPLICATION_TEXT


def _stored_profile() -> ApplicantProfile:
    return ApplicantProfile(
        personal=PersonalInfo(
            first_name="Lena",
            last_name="Okafor",
            date_of_birth="2000-01-31",
            citizenship="Nigeria",
            passport_number="A1234567",
            phone="+234 800 000 0000",
            alternate_email="lena.alt@example.com",
        ),
        address=Address(street="5 Marina", city="Lagos", province="Lagos", zip_code="101001", country="Nigeria"),
        background=Background(visa_refusal=False, has_valid_permit=None, permit_details=""),
        highest_education=HighestEducation(
            country="Nigeria", level="Bachelor", grading_scheme="CGPA", grade_average="4.1", graduated=True
        ),
        school_history=[
            SchoolRecord(
                country="Nigeria",
                name="University of Lagos",
                level="Bachelor",
                language="English",
                attended_from="2017-09-01",
                attended_to="2021-07-01",
                degree="BSc Economics",
                graduated=True,
                certificate_available=None,
                address=SchoolAddress(city="Lagos"),
            ),
            SchoolRecord(name="Kings College", level="Secondary", graduated=True),
        ],
        test_scores=ScoreSection(
            proof_available=True,
            conditional_admission=False,
            language_status="IELTS booked",
            gre_score="318",
            open_to_language_course=False,
        ),
        additional=AdditionalDetails(emergency_contacts="Mum: +234 800 111 2222", notes=None),
    )


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (True, True),
        (False, False),
        ("true", True),
        ("True", True),
        ("yes", True),
        ("NO", False),
        ("", None),
        (None, None),
        ("banana", False),
        ("Yes", True),
        ("No", False),
    ],
)
def test_coerce_tri_state(value, expected) -> None:
    assert coerce_tri_state(value) is expected


def test_read_field_distinguishes_missing_from_empty_string() -> None:
    assert read_field({}, "city") is ABSENT
    assert read_field({"city": None}, "city") is ABSENT
    assert read_field({"city": ""}, "city") == Provided("")


def test_address_only_update_leaves_other_sections_unchanged() -> None:
    stored = _stored_profile()
    updated = apply_client_update(stored, {"addressDetails": {"city": "Abuja", "postalCode": "900001"}})

    assert updated.address.city == "Abuja"
    assert updated.address.zip_code == "900001"
    assert updated.address.street == "5 Marina"
    for name in ("personal", "background", "highest_education", "school_history", "test_scores", "additional"):
        assert getattr(updated, name) == getattr(stored, name)
    assert updated.model_dump_json(exclude={"address"}) == stored.model_dump_json(exclude={"address"})


def test_update_does_not_mutate_input_profile() -> None:
    stored = _stored_profile()
    before = stored.model_dump()
    apply_client_update(stored, {"personalInfo": {"firstName": "Changed"}, "schoolHistory": []})
    assert stored.model_dump() == before


def test_projection_round_trip_is_idempotent() -> None:
    stored = _stored_profile()
    assert apply_client_update(stored, project_for_client(stored)) == stored


def test_round_trip_of_empty_profile_keeps_sections_unwritten() -> None:
    empty = ApplicantProfile()
    assert apply_client_update(empty, project_for_client(empty)) == empty


def test_empty_string_clears_text_but_not_tri_state() -> None:
    stored = _stored_profile()
    updated = apply_client_update(
        stored,
        {
            "personalInfo": {"phone": "", "citizenship": None},
            "backgroundInfo": {"visaRefusal": ""},
            "educationDetails": {"graduated": None},
        },
    )
    assert updated.personal.phone == ""
    assert updated.personal.citizenship == "Nigeria"
    assert updated.background.visa_refusal is False
    assert updated.highest_education.graduated is True


def test_tri_state_fields_accept_strings_and_booleans() -> None:
    updated = apply_client_update(
        ApplicantProfile(),
        {
            "backgroundInfo": {"visaRefusal": "Yes", "hasValidPermit": False},
            "testScores": {"proofAvailable": "no", "openToLanguageCourse": "TRUE", "conditionalAdmission": "maybe"},
        },
    )
    assert updated.background.visa_refusal is True
    assert updated.background.has_valid_permit is False
    assert updated.test_scores.proof_available is False
    assert updated.test_scores.open_to_language_course is True
    assert updated.test_scores.conditional_admission is False


def test_school_history_is_replaced_wholesale_and_renamed() -> None:
    stored = _stored_profile()
    updated = apply_client_update(
        stored,
        {
            "schoolHistory": [
                {
                    "schoolName": "University of Toronto",
                    "country": "Canada",
                    "attendedFrom": "2022-09-01",
                    "graduated": "No",
                    "certificateAvailable": "yes",
                    "address": {"city": "Toronto", "postalCode": "M5S 1A1"},
                }
            ]
        },
    )
    assert len(updated.school_history) == 1
    record = updated.school_history[0]
    assert record.name == "University of Toronto"
    assert record.attended_from == "2022-09-01"
    assert record.graduated is False
    assert record.certificate_available is True
    assert record.address == SchoolAddress(city="Toronto", zip_code="M5S 1A1")
    assert record.degree is None


def test_empty_school_history_list_clears_history() -> None:
    assert apply_client_update(_stored_profile(), {"schoolHistory": []}).school_history == []


def test_non_string_scalars_are_stored_as_text() -> None:
    updated = apply_client_update(ApplicantProfile(), {"educationDetails": {"gradeAverage": 3.7}})
    assert updated.highest_education.grade_average == "3.7"


@pytest.mark.parametrize(
    "payload",
    [
        {"personalInfo": "Lena"},
        {"schoolHistory": {"schoolName": "x"}},
        {"schoolHistory": ["x"]},
        {"addressDetails": {"city": {"name": "Lagos"}}},
    ],
)
def test_malformed_payload_is_rejected(payload) -> None:
    with pytest.raises(ProfilePayloadError):
        apply_client_update(ApplicantProfile(), payload)


def test_present_sections_names_storage_sections() -> None:
    payload = {"addressDetails": {}, "schoolHistory": [], "testScores": None, "name": "x"}
    assert present_sections(payload) == ["address", "school_history"]


def test_projection_renders_tri_states_with_conditional_admission_raw() -> None:
    projected = project_for_client(_stored_profile())

    assert projected["backgroundInfo"] == {"permitDetails": "", "visaRefusal": "No", "hasValidPermit": ""}
    assert projected["educationDetails"]["graduated"] == "Yes"
    assert projected["testScores"]["proofAvailable"] == "Yes"
    assert projected["testScores"]["conditionalAdmission"] is False
    assert projected["testScores"]["hasGreScores"] == ""
    assert projected["personalInfo"]["studentEmail"] == "lena.alt@example.com"
    assert projected["addressDetails"]["postalCode"] == "101001"
    assert projected["schoolHistory"][0]["schoolName"] == "University of Lagos"
    assert projected["schoolHistory"][0]["certificateAvailable"] == ""
    assert projected["schoolHistory"][0]["address"]["city"] == "Lagos"


def test_projection_tolerates_missing_sections() -> None:
    projected = project_for_client(ApplicantProfile())

    assert list(projected) == [
        "personalInfo",
        "addressDetails",
        "backgroundInfo",
        "educationDetails",
        "schoolHistory",
        "testScores",
        "additionalDetails",
    ]
    assert projected["personalInfo"]["firstName"] is None
    assert projected["backgroundInfo"]["visaRefusal"] == ""
    assert projected["testScores"]["conditionalAdmission"] is None
    assert projected["schoolHistory"] == []


def test_extracted_profile_converges_onto_stored_shape() -> None:
    stored = _stored_profile()
    stored.test_scores.has_gmat_scores = True
    updated = apply_extracted_profile(stored, extract(APPLICATION_TEXT))

    assert updated.personal.first_name == "Priya"
    assert updated.personal.date_of_birth == "1999-04-12"
    assert updated.personal.citizenship == "India"
    assert updated.personal.passport_number == "A1234567"
    assert updated.address.zip_code == "560001"
    assert updated.address.country == "Nigeria"
    assert [record.name for record in updated.school_history] == ["University of Delhi"]
    assert updated.school_history[0].attended_to == "2020-06-30"
    assert updated.school_history[0].graduated is True
    assert updated.test_scores.has_gre_scores is True
    # Phrase absence reads as False and overwrites what was stored.
    assert updated.test_scores.has_gmat_scores is False
    assert updated.test_scores.gre_score == "318"
    assert updated.background == stored.background


def test_extraction_without_education_keeps_school_history() -> None:
    stored = _stored_profile()
    updated = apply_extracted_profile(stored, extract("First Name * Lena\n"))
    assert updated.school_history == stored.school_history
