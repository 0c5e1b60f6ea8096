"""
Certification Logic Module

Provides the deterministic engine that turns raw attempt scores into
CEFR levels, an overall score and a certificate view-model.
"""

from .contracts import (
    AttemptRecord,
    CandidateIdentity,
    ScoreSet,
    CefrLevels,
    CertificationRecord,
    ReconcileResult,
    PaymentStatus,
)
from .classifier import classify, level_label, score_range
from .aggregator import aggregate, normalize_score, normalize_scores, round_half_up
from .builder import build, share_text, download_filename
from .constants import ProficiencyLevel, TransactionStatus

__all__ = [
    # Engine
    "classify",
    "level_label",
    "score_range",
    "aggregate",
    "normalize_score",
    "normalize_scores",
    "round_half_up",
    "build",
    "share_text",
    "download_filename",

    # Contracts
    "AttemptRecord",
    "CandidateIdentity",
    "ScoreSet",
    "CefrLevels",
    "CertificationRecord",
    "ReconcileResult",
    "PaymentStatus",

    # Enums
    "ProficiencyLevel",
    "TransactionStatus",
]
