"""
Certification API Routes

Exposes certificates, reattempt payments and attempt start/completion.
Domain errors are translated to HTTP status codes here and nowhere else.
"""

import logging
import uuid
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from db import get_db
from models.schemas_user import UserOut
from utils.auth_deps import auth_user
from utils.crud_attempts import count_attempts, create_attempt, get_attempt_for_user, record_scores, issue_certificate
from .errors import (
    CertificationError,
    RecordUnavailable,
    UnknownReference,
    GatewayError,
    ConfigurationError,
    ScoreValidationError,
    PaymentRequired,
)
from .logic.builder import share_text, display_name, download_filename
from .logic.classifier import level_label, score_range
from .logic.constants import REATTEMPT_PURPOSE, SKILLS
from .logic.contracts import CertificationRecord, PaymentStatus, ReconcileResult
from .logic.runner import run_certificate
from .payments.gate import PaymentGate

logger = logging.getLogger(__name__)

certificates_router = APIRouter(prefix="/certificates", tags=["certificates"])
payments_router = APIRouter(prefix="/payments", tags=["payments"])
attempts_router = APIRouter(prefix="/attempts", tags=["attempts"])


# =============================================================================
# REQUEST/RESPONSE SCHEMAS
# =============================================================================

class InitiatePaymentRequest(BaseModel):
    purpose: str = Field(default=REATTEMPT_PURPOSE, min_length=1, max_length=32, description="Purpose tag stored on the transaction")


class VerifyPaymentRequest(BaseModel):
    reference: Optional[str] = Field(default=None, description="Reference returned by /payments/initiate")


class ScoreSubmission(BaseModel):
    listening: Optional[float] = Field(default=None, allow_inf_nan=False)
    reading: Optional[float] = Field(default=None, allow_inf_nan=False)
    writing: Optional[float] = Field(default=None, allow_inf_nan=False)
    speaking: Optional[float] = Field(default=None, allow_inf_nan=False)


# =============================================================================
# DEPENDENCIES / ERROR MAPPING
# =============================================================================

def get_payment_gate() -> PaymentGate:
    return PaymentGate()


_ERROR_STATUS = {
    RecordUnavailable: 404,
    UnknownReference: 404,
    PaymentRequired: 402,
    ScoreValidationError: 422,
    GatewayError: 502,
    ConfigurationError: 503,
}


def _to_http(error: CertificationError) -> HTTPException:
    status_code = next(
        (code for cls, code in _ERROR_STATUS.items() if isinstance(error, cls)),
        500,
    )
    detail = error.message
    if isinstance(error, GatewayError):
        # distinct from a declined payment, which is a 200 with status "failed"
        detail = "Could not verify the payment right now. Please try again shortly."
    return HTTPException(status_code=status_code, detail=detail)


def _serialize_certificate(record: CertificationRecord) -> Dict[str, Any]:
    data = record.model_dump(mode="json")
    data["display_name"] = display_name(record)
    data["overall_label"] = level_label(record.cefr.overall)
    data["skills"] = {
        skill: {
            "score": getattr(record.scores, skill),
            "cefr": getattr(record.cefr, skill).value,
            "label": level_label(getattr(record.cefr, skill)),
            "range": score_range(getattr(record.scores, skill)),
        }
        for skill in SKILLS
    }
    data["share_text"] = share_text(record)
    data["pdf_filename"] = download_filename(record, "pdf")
    data["png_filename"] = download_filename(record, "png")
    return data



# =============================================================================
# CERTIFICATES
# =============================================================================

@certificates_router.get("/{attempt_id}", summary="Certificate for a completed attempt")
def get_certificate(
    attempt_id: str,
    cached_name: Optional[str] = Query(default=None, description="Name remembered by the client"),
    current: UserOut = Depends(auth_user),
    db: Session = Depends(get_db),
):
    """
    Build the certificate view-model for one of the caller's attempts.

    Returns 404 when the attempt cannot be located; never a partial certificate.
    """
    try:
        record = run_certificate(db, attempt_id, current.id, cached_name=cached_name)
    except CertificationError as e:
        raise _to_http(e)
    return _serialize_certificate(record)


# =============================================================================
# PAYMENTS
# =============================================================================

@payments_router.get("/config", response_model=PaymentStatus, summary="Is the paid reattempt available")
def payment_config(gate: PaymentGate = Depends(get_payment_gate)):
    return gate.status()


@payments_router.post("/initiate", summary="Create a pending payment transaction")
def initiate_payment(
    request: InitiatePaymentRequest,
    current: UserOut = Depends(auth_user),
    gate: PaymentGate = Depends(get_payment_gate),
    db: Session = Depends(get_db),
):
    try:
        txn = gate.initiate(db, current.id, purpose=request.purpose)
    except CertificationError as e:
        raise _to_http(e)
    return {
        "reference": txn.reference,
        "amount": txn.amount,
        "currency": txn.currency,
        "purpose": txn.purpose,
        "status": txn.status,
        "email": current.email,
        "public_key": gate.settings.public_key,
    }


@payments_router.post("/verify", response_model=ReconcileResult, summary="Reconcile a payment reference")
async def verify_payment(
    request: VerifyPaymentRequest,
    current: UserOut = Depends(auth_user),
    gate: PaymentGate = Depends(get_payment_gate),
    db: Session = Depends(get_db),
):
    """
    Verify a reference with the gateway and store verified/failed.

    **Errors:**
    - 400: reference missing
    - 404: reference unknown
    - 502: gateway unavailable; the transaction stays pending, retry later
    - 503: gateway credentials not configured
    """
    if not request.reference:
        raise HTTPException(status_code=400, detail="missing reference")

    try:
        return await gate.reconcile(db, request.reference, owner_id=current.id)
    except CertificationError as e:
        logger.info(f"Payment verify for {request.reference} failed: {e.message}")
        raise _to_http(e)


@payments_router.get("/eligibility", summary="Can the caller start a paid reattempt")
def payment_eligibility(
    current: UserOut = Depends(auth_user),
    gate: PaymentGate = Depends(get_payment_gate),
    db: Session = Depends(get_db),
):
    return {"can_start_paid_attempt": gate.can_start_attempt(db, current.id)}


# =============================================================================
# ATTEMPTS
# =============================================================================

@attempts_router.post("", status_code=201, summary="Start a test attempt")
@attempts_router.post("/", status_code=201, summary="Start a test attempt", include_in_schema=False)
def start_attempt(
    current: UserOut = Depends(auth_user),
    gate: PaymentGate = Depends(get_payment_gate),
    db: Session = Depends(get_db),
):
    """
    The first attempt is free. Every later attempt consumes one verified
    reattempt payment in the same transaction that creates the attempt.
    """
    attempt_id = str(uuid.uuid4())
    paid_reference = None
    try:
        if count_attempts(db, current.id) > 0:
            paid_reference = gate.consume_reattempt(db, current.id, attempt_id)
    except CertificationError as e:
        raise _to_http(e)
    try:
        attempt = create_attempt(db, user_id=current.id, paid_reference=paid_reference, attempt_id=attempt_id)
        db.commit()
    except IntegrityError:
        # another request already took the free attempt
        db.rollback()
        logger.info(f"Concurrent free attempt rejected for user {current.id}")
        raise _to_http(PaymentRequired("A verified reattempt payment is required to start a new test"))
    return {
        "attempt_id": attempt.id,
        "paid_reference": paid_reference,
        "test_date": attempt.test_date.isoformat(),
    }


@attempts_router.put("/{attempt_id}/scores", summary="Record a completed attempt's scores")
def submit_scores(
    attempt_id: str,
    submission: ScoreSubmission,
    current: UserOut = Depends(auth_user),
    db: Session = Depends(get_db),
):
    attempt = get_attempt_for_user(db, attempt_id, current.id)
    if attempt is None:
        raise HTTPException(status_code=404, detail="Attempt not found")
    record_scores(db, attempt, submission.model_dump(exclude_unset=True))
    certificate_id = issue_certificate(db, attempt.id)
    db.commit()
    return {"attempt_id": attempt_id, "certificate_id": certificate_id, "completed": True}
