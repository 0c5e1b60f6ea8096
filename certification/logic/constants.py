"""
Certification Constants

Defines the CEFR bands, their thresholds and labels, the skill names,
and the payment defaults used by the certification engine.
All values are deterministic.
"""

from enum import Enum
from typing import Dict, List, Tuple


# =============================================================================
# CEFR LEVELS
# =============================================================================

class ProficiencyLevel(str, Enum):
    """CEFR proficiency band."""
    A0 = "A0"
    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"


# Ordered lowest to highest; used for monotonicity checks and comparisons
LEVEL_ORDER: List[ProficiencyLevel] = [
    ProficiencyLevel.A0,
    ProficiencyLevel.A1,
    ProficiencyLevel.A2,
    ProficiencyLevel.B1,
    ProficiencyLevel.B2,
    ProficiencyLevel.C1,
    ProficiencyLevel.C2,
]

# Minimum score (inclusive) for each band, checked highest first
LEVEL_THRESHOLDS: List[Tuple[int, ProficiencyLevel]] = [
    (86, ProficiencyLevel.C2),
    (71, ProficiencyLevel.C1),
    (51, ProficiencyLevel.B2),
    (41, ProficiencyLevel.B1),
    (21, ProficiencyLevel.A2),
    (11, ProficiencyLevel.A1),
]

LEVEL_LABELS: Dict[ProficiencyLevel, str] = {
    ProficiencyLevel.A0: "Novice",
    ProficiencyLevel.A1: "Beginner",
    ProficiencyLevel.A2: "Elementary",
    ProficiencyLevel.B1: "Intermediate",
    ProficiencyLevel.B2: "Upper Intermediate",
    ProficiencyLevel.C1: "Advanced",
    ProficiencyLevel.C2: "Proficient",
}

# Display range printed next to each band on the certificate
LEVEL_SCORE_RANGES: Dict[ProficiencyLevel, str] = {
    ProficiencyLevel.A0: "0-10",
    ProficiencyLevel.A1: "11-20",
    ProficiencyLevel.A2: "21-40",
    ProficiencyLevel.B1: "41-50",
    ProficiencyLevel.B2: "51-70",
    ProficiencyLevel.C1: "71-85",
    ProficiencyLevel.C2: "86-100",
}


# =============================================================================
# SCORES
# =============================================================================

SKILLS: List[str] = ["listening", "reading", "writing", "speaking"]

MIN_SCORE = 0
MAX_SCORE = 100

FALLBACK_CANDIDATE_NAME = "Candidate"
CERTIFICATE_ID_PREFIX = "CERT-"
CERTIFICATE_ID_FALLBACK_LENGTH = 8

MONTH_ABBREVIATIONS: List[str] = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]

MONTH_NAMES: List[str] = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


# =============================================================================
# PAYMENTS
# =============================================================================

class TransactionStatus(str, Enum):
    """Ledger status of a payment transaction."""
    PENDING = "pending"
    SUCCESS = "success"      # client-reported, never authoritative
    VERIFIED = "verified"
    FAILED = "failed"


REATTEMPT_PURPOSE = "reattempt"

# Gateway status that maps to a verified ledger row
GATEWAY_SUCCESS_STATUS = "success"

DEFAULT_REATTEMPT_AMOUNT = 250000  # KES 2,500 in minor units
DEFAULT_CURRENCY = "KES"

PUBLIC_KEY_PREFIXES: Tuple[str, ...] = ("pk_live", "pk_test")
