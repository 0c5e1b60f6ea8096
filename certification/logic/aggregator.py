"""
Score Aggregator

Normalizes raw skill scores and combines the four skills into an
overall score using an unweighted mean.
"""

import math
from numbers import Real
from typing import Any

from .contracts import ScoreSet
from .constants import SKILLS, MIN_SCORE, MAX_SCORE
from ..errors import ScoreValidationError


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def normalize_score(raw: Any) -> int:
    """
    Turn a raw skill score into a classifiable integer.

    Missing values count as 0, values are rounded to the nearest integer
    and then clamped into [0, 100]; infinities clamp to the nearest bound.

    Raises:
        ScoreValidationError: raw is not a number (including NaN)
    """
    if raw is None:
        return MIN_SCORE
    if isinstance(raw, bool) or not isinstance(raw, (Real, str)):
        raise ScoreValidationError(f"Invalid score: {raw!r}")
    try:
        value = float(raw)
    except ValueError:
        raise ScoreValidationError(f"Invalid score: {raw!r}")
    if math.isnan(value):
        raise ScoreValidationError(f"Invalid score: {raw!r}")
    if math.isinf(value):
        return MAX_SCORE if value > 0 else MIN_SCORE

    return max(MIN_SCORE, min(MAX_SCORE, round_half_up(value)))


def normalize_scores(**raw_scores: Any) -> ScoreSet:
    """Build a ScoreSet from raw keyword scores; absent skills count as 0."""
    return ScoreSet(**{skill: normalize_score(raw_scores.get(skill)) for skill in SKILLS})


def aggregate(scores: ScoreSet) -> int:
    """
    Overall score: round((listening + reading + writing + speaking) / 4).

    Args:
        scores: Normalized skill scores

    Returns:
        Overall score as an integer
    """
    total = scores.listening + scores.reading + scores.writing + scores.speaking
    return round_half_up(total / len(SKILLS))
