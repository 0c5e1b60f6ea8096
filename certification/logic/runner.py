"""
Certificate Runner

Orchestrates certificate assembly for one attempt:
1. Reads the attempt, scoped to its owner
2. Reads the profile display name and the issued certificate id
3. Runs the record builder

This is a pure orchestration layer - NO scoring, NO formatting.
"""

import logging
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from utils.crud_attempts import get_attempt_for_user, get_certificate_id
from utils.crud_user import get_profile_name
from .contracts import AttemptRecord, CandidateIdentity, CertificationRecord
from .builder import build
from ..errors import RecordUnavailable

logger = logging.getLogger(__name__)


def run_certificate(
    db: Session,
    attempt_id: str,
    user_id: str,
    cached_name: Optional[str] = None,
) -> CertificationRecord:
    """
    Load everything a certificate needs and build it.

    Args:
        db: Database session
        attempt_id: Attempt to certify
        user_id: Authenticated caller; the attempt must belong to them
        cached_name: Name the client remembered locally, if any

    Raises:
        RecordUnavailable: attempt not found, not owned, or the store failed
    """
    try:
        attempt = get_attempt_for_user(db, attempt_id, user_id)
    except SQLAlchemyError as e:
        logger.error(f"Attempt lookup failed for {attempt_id}: {e}")
        raise RecordUnavailable("Certificate not found") from e

    if attempt is None:
        logger.info(f"Attempt {attempt_id} not found for user {user_id}")
        raise RecordUnavailable("Certificate not found")

    # Profile and certificate rows are optional; the builder falls back
    try:
        profile_name = get_profile_name(db, user_id)
        certificate_id = get_certificate_id(db, attempt_id)
    except SQLAlchemyError as e:
        logger.error(f"Certificate lookup failed for {attempt_id}: {e}")
        raise RecordUnavailable("Certificate not found") from e

    return build(
        AttemptRecord.model_validate(attempt),
        CandidateIdentity(profile_name=profile_name, cached_name=cached_name),
        certificate_id,
    )
