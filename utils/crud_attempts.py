import secrets
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from models.models import TestAttempt, Certificate

def get_attempt_for_user(db: Session, attempt_id: str, user_id: str) -> TestAttempt | None:
    return db.execute(
        select(TestAttempt).where(TestAttempt.id == attempt_id, TestAttempt.user_id == user_id)
    ).scalar_one_or_none()

def get_certificate_id(db: Session, attempt_id: str) -> str | None:
    return db.execute(
        select(Certificate.certificate_id).where(Certificate.test_attempt_id == attempt_id)
    ).scalar_one_or_none()

def count_attempts(db: Session, user_id: str) -> int:
    return db.execute(
        select(func.count()).select_from(TestAttempt).where(TestAttempt.user_id == user_id)
    ).scalar_one()

def create_attempt(db: Session, *, user_id: str, paid_reference: Optional[str] = None, attempt_id: Optional[str] = None) -> TestAttempt:
    attempt = TestAttempt(
        user_id=user_id,
        paid_reference=paid_reference,
        free_attempt_owner=None if paid_reference else user_id,
    )
    if attempt_id:
        attempt.id = attempt_id
    db.add(attempt)
    db.flush()
    return attempt

def record_scores(db: Session, attempt: TestAttempt, scores: dict) -> TestAttempt:
    for skill in ("listening", "reading", "writing", "speaking"):
        if skill in scores:
            setattr(attempt, f"{skill}_score", scores[skill])
    attempt.completed = True
    return attempt

def issue_certificate(db: Session, attempt_id: str) -> str:
    existing = get_certificate_id(db, attempt_id)
    if existing is not None:
        return existing
    certificate_id = f"CERT-{secrets.token_hex(4).upper()}"
    db.add(Certificate(test_attempt_id=attempt_id, certificate_id=certificate_id))
    db.flush()
    return certificate_id
