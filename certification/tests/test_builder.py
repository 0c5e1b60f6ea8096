"""
Tests for the certificate record builder.
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from certification.errors import RecordUnavailable
from certification.logic.builder import (
    build,
    award_phrase,
    format_test_date,
    share_text,
    display_name,
    download_filename,
)
from certification.logic.constants import ProficiencyLevel
from certification.logic.contracts import AttemptRecord, CandidateIdentity


def _attempt(**overrides):
    data = {
        "id": "abc12345-xyz",
        "listening_score": 72.4,
        "reading_score": 80,
        "writing_score": 64.5,
        "speaking_score": 90,
        "test_date": datetime(2024, 3, 5, 14, 30),
    }
    data.update(overrides)
    return AttemptRecord(**data)


def test_null_skill_counts_as_zero():
    record = build(
        _attempt(listening_score=None, reading_score=55, writing_score=55, speaking_score=55),
        CandidateIdentity(profile_name="Amina"),
    )
    assert record.scores.listening == 0
    assert record.total_score == 41
    assert record.cefr.overall == ProficiencyLevel.B1
    assert record.cefr.listening == ProficiencyLevel.A0
    assert record.cefr.reading == ProficiencyLevel.B2


def test_scores_are_rounded_before_classification():
    record = build(_attempt(), CandidateIdentity())
    assert record.scores.listening == 72
    assert record.scores.writing == 65
    # (72 + 80 + 65 + 90) / 4 = 76.75
    assert record.total_score == 77
    assert record.cefr.overall == ProficiencyLevel.C1
    assert record.cefr.speaking == ProficiencyLevel.C2


def test_out_of_range_scores_are_clamped():
    record = build(_attempt(listening_score=140, reading_score=-8), CandidateIdentity())
    assert record.scores.listening == 100
    assert record.scores.reading == 0


def test_certificate_id_fallback():
    record = build(_attempt(), CandidateIdentity(), None)
    assert record.certificate_id == "CERT-abc12345"


def test_issued_certificate_id_wins():
    record = build(_attempt(), CandidateIdentity(), "CERT-9F3A12BC")
    assert record.certificate_id == "CERT-9F3A12BC"


def test_name_fallback_chain():
    assert build(_attempt(), CandidateIdentity(profile_name="Amina W", cached_name="Old")).candidate_name == "Amina W"
    assert build(_attempt(), CandidateIdentity(cached_name="Cached Name")).candidate_name == "Cached Name"
    assert build(_attempt(), CandidateIdentity()).candidate_name == "Candidate"


def test_empty_profile_name_is_a_value():
    record = build(_attempt(), CandidateIdentity(profile_name="", cached_name="Cached"))
    assert record.candidate_name == ""


def test_missing_attempt_raises():
    with pytest.raises(RecordUnavailable):
        build(None, CandidateIdentity(profile_name="Amina"))


def test_record_is_immutable():
    record = build(_attempt(), CandidateIdentity())
    with pytest.raises(ValidationError):
        record.total_score = 99


def test_date_formats():
    assert format_test_date(datetime(2024, 3, 5)) == "05 Mar 2024"
    assert format_test_date("2023-12-21T09:15:00Z") == "21 Dec 2023"
    assert award_phrase("2024-03-01") == "1st day of March, 2024"
    assert award_phrase("2024-03-02") == "2nd day of March, 2024"
    assert award_phrase("2024-03-03") == "3rd day of March, 2024"
    assert award_phrase("2024-03-11") == "11th day of March, 2024"
    assert award_phrase("2024-03-22") == "22nd day of March, 2024"


def test_unreadable_date_is_record_level_failure():
    with pytest.raises(RecordUnavailable):
        build(_attempt(test_date="not a date"), CandidateIdentity())


def test_share_and_export_helpers():
    record = build(_attempt(), CandidateIdentity(profile_name="amina  wanjiru"))
    assert record.test_date == "05 Mar 2024"
    assert record.award_date == "5th day of March, 2024"
    assert share_text(record) == "I achieved C1 CEFR level on my IELTS test!"
    assert display_name(record) == "Amina  Wanjiru"
    assert download_filename(record) == "IELTS_Pro_Certificate_amina_wanjiru.pdf"
    assert download_filename(record, "png") == "IELTS_Pro_Certificate_amina_wanjiru.png"
