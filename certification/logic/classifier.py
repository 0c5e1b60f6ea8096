"""
Level Classifier

Maps a numeric score to a CEFR proficiency band:
- C2 (86+), C1 (71-85), B2 (51-70), B1 (41-50)
- A2 (21-40), A1 (11-20), A0 (10 and below)

Total over the integers: negatives fall into A0, anything above 100 into C2.
"""

from .constants import (
    ProficiencyLevel,
    LEVEL_THRESHOLDS,
    LEVEL_LABELS,
    LEVEL_SCORE_RANGES,
    LEVEL_ORDER,
)


def classify(score: int) -> ProficiencyLevel:
    """
    Classify a score into a proficiency band.

    Args:
        score: Any integer; not required to be clamped

    Returns:
        ProficiencyLevel enum value
    """
    # Check thresholds from highest to lowest
    for minimum, level in LEVEL_THRESHOLDS:
        if score >= minimum:
            return level

    return ProficiencyLevel.A0


def level_label(level: ProficiencyLevel) -> str:
    """Human label for a band, e.g. B2 -> "Upper Intermediate"."""
    return LEVEL_LABELS[ProficiencyLevel(level)]


def score_range(score: int) -> str:
    """Display range of the band a score falls into, e.g. 60 -> "51-70"."""
    return LEVEL_SCORE_RANGES[classify(score)]


def level_rank(level: ProficiencyLevel) -> int:
    """Position of a band in ascending order (A0 = 0)."""
    return LEVEL_ORDER.index(ProficiencyLevel(level))
