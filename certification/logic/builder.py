"""
Certification Record Builder

Assembles the immutable certificate view-model for one completed attempt:
normalized skill scores, overall score, CEFR levels, candidate name,
certificate id and formatted dates.

Also provides the small text helpers the export/share collaborator uses.
"""

import re
from datetime import datetime, date
from typing import Iterable, Optional, Union

from .contracts import AttemptRecord, CandidateIdentity, CertificationRecord, CefrLevels, ScoreSet
from .aggregator import normalize_score, aggregate
from .classifier import classify
from .constants import (
    SKILLS,
    FALLBACK_CANDIDATE_NAME,
    CERTIFICATE_ID_PREFIX,
    CERTIFICATE_ID_FALLBACK_LENGTH,
    MONTH_ABBREVIATIONS,
    MONTH_NAMES,
)
from ..errors import RecordUnavailable


def first_present(candidates: Iterable[Optional[str]], default: str) -> str:
    """Return the first value that is not None, else the default."""
    for value in candidates:
        if value is not None:
            return value
    return default


def resolve_candidate_name(identity: CandidateIdentity) -> str:
    return first_present(
        [identity.profile_name, identity.cached_name],
        FALLBACK_CANDIDATE_NAME,
    )


def resolve_certificate_id(certificate_id: Optional[str], attempt_id: str) -> str:
    fallback = f"{CERTIFICATE_ID_PREFIX}{attempt_id[:CERTIFICATE_ID_FALLBACK_LENGTH]}"
    return first_present([certificate_id], fallback)


def _as_date(value: Union[datetime, date, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    # fromisoformat before 3.11 rejects a trailing Z
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise RecordUnavailable(f"Unreadable test date: {value!r}")


def format_test_date(value: Union[datetime, date, str]) -> str:
    """Format as DD Mon YYYY, e.g. "05 Mar 2024"."""
    d = _as_date(value)
    return f"{d.day:02d} {MONTH_ABBREVIATIONS[d.month - 1]} {d.year}"


def _ordinal_suffix(day: int) -> str:
    if day % 10 == 1 and day != 11:
        return "st"
    if day % 10 == 2 and day != 12:
        return "nd"
    if day % 10 == 3 and day != 13:
        return "rd"
    return "th"


def award_phrase(value: Union[datetime, date, str]) -> str:
    """Long form used in the certificate body, e.g. "5th day of March, 2024"."""
    d = _as_date(value)
    return f"{d.day}{_ordinal_suffix(d.day)} day of {MONTH_NAMES[d.month - 1]}, {d.year}"


def build(
    attempt: Optional[AttemptRecord],
    identity: CandidateIdentity,
    certificate_id: Optional[str] = None,
) -> CertificationRecord:
    """
    Build the certificate for a completed attempt.

    Args:
        attempt: Raw attempt record; None means it could not be located
        identity: Candidate display-name sources
        certificate_id: Externally issued id, if one exists

    Returns:
        CertificationRecord

    Raises:
        RecordUnavailable: attempt is missing
    """
    if attempt is None:
        raise RecordUnavailable("Certificate not found")

    scores = {
        skill: normalize_score(getattr(attempt, f"{skill}_score"))
        for skill in SKILLS
    }
    score_set = ScoreSet(**scores)
    total_score = aggregate(score_set)

    cefr = CefrLevels(
        overall=classify(total_score),
        **{skill: classify(score) for skill, score in scores.items()},
    )

    return CertificationRecord(
        candidate_name=resolve_candidate_name(identity),
        test_date=format_test_date(attempt.test_date),
        award_date=award_phrase(attempt.test_date),
        certificate_id=resolve_certificate_id(certificate_id, attempt.id),
        scores=score_set,
        total_score=total_score,
        cefr=cefr,
    )


# =============================================================================
# SHARE / EXPORT HELPERS
# =============================================================================

def share_text(record: CertificationRecord) -> str:
    return f"I achieved {record.cefr.overall.value} CEFR level on my IELTS test!"


def display_name(record: CertificationRecord) -> str:
    """Candidate name with each word capitalized, as printed on the certificate."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), record.candidate_name)


def download_filename(record: CertificationRecord, extension: str = "pdf") -> str:
    safe_name = re.sub(r"\s+", "_", record.candidate_name)
    return f"IELTS_Pro_Certificate_{safe_name}.{extension}"
