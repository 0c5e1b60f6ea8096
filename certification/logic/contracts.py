"""
Data Contracts for the Certification Engine

Defines Pydantic models for the attempt input, the certificate view-model
output, and the payment gate results.
These contracts are the API boundary for the engine.
"""

from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel, Field

from .constants import ProficiencyLevel, TransactionStatus


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class AttemptRecord(BaseModel):
    """
    One completed test attempt as read from the attempt store.
    Skill scores may be missing or out of range; they are normalized by the builder.
    """
    id: str
    listening_score: Optional[float] = None
    reading_score: Optional[float] = None
    writing_score: Optional[float] = None
    speaking_score: Optional[float] = None
    test_date: Union[datetime, str]

    class Config:
        from_attributes = True


class CandidateIdentity(BaseModel):
    """
    Display-name sources, highest priority first.
    None means the source is absent; an empty string is a real value.
    """
    profile_name: Optional[str] = None
    cached_name: Optional[str] = None


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class ScoreSet(BaseModel):
    """Four rounded skill scores, each within [0, 100]."""
    listening: int = Field(ge=0, le=100)
    reading: int = Field(ge=0, le=100)
    writing: int = Field(ge=0, le=100)
    speaking: int = Field(ge=0, le=100)

    class Config:
        frozen = True


class CefrLevels(BaseModel):
    """Per-skill and overall proficiency bands."""
    overall: ProficiencyLevel
    listening: ProficiencyLevel
    reading: ProficiencyLevel
    writing: ProficiencyLevel
    speaking: ProficiencyLevel

    class Config:
        frozen = True


class CertificationRecord(BaseModel):
    """
    Certificate view-model for one completed attempt.
    Immutable; re-derive from the attempt instead of mutating.
    """
    candidate_name: str
    test_date: str           # DD Mon YYYY
    award_date: str          # e.g. "5th day of March, 2024"
    certificate_id: str
    scores: ScoreSet
    total_score: int = Field(ge=0, le=100)
    cefr: CefrLevels

    class Config:
        frozen = True


class ReconcileResult(BaseModel):
    """Outcome of verifying a payment reference against the gateway."""
    reference: str
    status: TransactionStatus
    gateway_status: Optional[str] = None
    amount: Optional[int] = None

    class Config:
        use_enum_values = True


class GatewayVerification(BaseModel):
    """Parsed verify-by-reference response."""
    status: Optional[str] = None
    amount: Optional[int] = None
    raw: dict = Field(default_factory=dict)


class PaymentStatus(BaseModel):
    """Whether the paid reattempt action is available to the client."""
    enabled: bool
    public_key: Optional[str] = None
    amount: int
    currency: str
    reason: Optional[str] = None
