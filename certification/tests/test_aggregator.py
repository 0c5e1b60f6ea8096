"""
Tests for score normalization and the overall score.
"""

import pytest

from certification.errors import ScoreValidationError
from certification.logic.aggregator import aggregate, normalize_score, normalize_scores, round_half_up
from certification.logic.contracts import ScoreSet


def test_aggregate_mean():
    assert aggregate(ScoreSet(listening=70, reading=80, writing=90, speaking=60)) == 75


def test_aggregate_rounds_down_below_half():
    assert aggregate(ScoreSet(listening=0, reading=0, writing=0, speaking=1)) == 0


def test_aggregate_rounds_half_up():
    # 202 / 4 = 50.5
    assert aggregate(ScoreSet(listening=50, reading=50, writing=51, speaking=51)) == 51


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.49) == 0
    assert round_half_up(41.25) == 41
    assert round_half_up(-2.5) == -2


def test_normalize_score():
    assert normalize_score(None) == 0
    assert normalize_score(55.5) == 56
    assert normalize_score("70") == 70
    assert normalize_score(130) == 100
    assert normalize_score(-4) == 0


@pytest.mark.parametrize("raw", ["abc", float("nan"), "nan", True, [50]])
def test_normalize_score_rejects_non_numbers(raw):
    with pytest.raises(ScoreValidationError):
        normalize_score(raw)


def test_normalize_score_clamps_infinities():
    assert normalize_score(float("inf")) == 100
    assert normalize_score(float("-inf")) == 0
    assert normalize_score("-Infinity") == 0


def test_normalize_scores_fills_missing_skills():
    scores = normalize_scores(reading=49.6, writing=101)
    assert scores == ScoreSet(listening=0, reading=50, writing=100, speaking=0)
