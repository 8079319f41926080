from __future__ import annotations

import re

from unipath.types import (
    CandidateAddress,
    CandidateEducation,
    CandidateProfile,
    CandidateTestScores,
)


def _label(label: str, value: str = r"[^\n]+", flags: int = re.IGNORECASE) -> re.Pattern[str]:
    return re.compile(re.escape(label) + r"\s+(" + value + ")", flags)


_DATE = r"[\d-]+"

# Labels as printed on the ApplyBoard-style application PDFs. Dates carry no
# case-insensitive flag: their labels are always rendered verbatim.
_FIRST_NAME = _label("First Name *")
_MIDDLE_NAME = _label("Middle Name")
_LAST_NAME = _label("Last Name")
_DATE_OF_BIRTH = _label("Date of Birth *", _DATE, flags=0)
_FIRST_LANGUAGE = _label("First Language *")
_CITIZENSHIP = _label("Country of Citizenship")

_STREET = _label("Street Address *")
_CITY = _label("City/Town")
_PROVINCE = _label("Province/State *")
_POSTAL_CODE = _label("Postal/Zip Code")

_INSTITUTION = _label("Name of Institution *")
_DEGREE = _label("Degree Name")
_ATTENDED_FROM = _label("Attended Institution From *", _DATE, flags=0)
_ATTENDED_TO = _label("Attended Institution To *", _DATE, flags=0)

GRADUATED_PHRASE = "I have graduated from this institution"
GRE_PHRASE = "I have GRE exam scores"
GMAT_PHRASE = "I have GMAT exam scores"


def extract(raw_text: str) -> CandidateProfile:
    """Pull labelled applicant fields out of text recovered from a PDF.

    Each field is the remainder of the line after the first occurrence of its
    label, or None when the label is missing. The graduated/GRE/GMAT flags are
    phrase-presence tests, so a missing phrase reads as False rather than
    unknown. Only one education entry is ever produced, and dates are returned
    exactly as captured.
    """
    text = raw_text or ""
    return CandidateProfile(
        first_name=_capture(_FIRST_NAME, text),
        middle_name=_capture(_MIDDLE_NAME, text),
        last_name=_capture(_LAST_NAME, text),
        dob=_capture(_DATE_OF_BIRTH, text),
        first_language=_capture(_FIRST_LANGUAGE, text),
        country_of_citizenship=_capture(_CITIZENSHIP, text),
        address=CandidateAddress(
            street=_capture(_STREET, text),
            city=_capture(_CITY, text),
            province=_capture(_PROVINCE, text),
            postal_code=_capture(_POSTAL_CODE, text),
        ),
        education=[
            CandidateEducation(
                institution=_capture(_INSTITUTION, text),
                degree=_capture(_DEGREE, text),
                from_date=_capture(_ATTENDED_FROM, text),
                to_date=_capture(_ATTENDED_TO, text),
                graduated=GRADUATED_PHRASE in text,
            )
        ],
        test_scores=CandidateTestScores(
            gre=GRE_PHRASE in text,
            gmat=GMAT_PHRASE in text,
        ),
    )


def _capture(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    if not match:
        return None
    return match.group(1).strip() or None
