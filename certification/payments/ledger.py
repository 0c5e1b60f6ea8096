"""
Transaction Ledger

SQL persistence for payment transactions. Every status change is a single
UPDATE keyed by reference so concurrent reconciliations of the same
reference serialize on the row.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from models.models import PaymentTransaction
from ..logic.constants import TransactionStatus, REATTEMPT_PURPOSE


def insert_transaction(
    db: Session,
    *,
    user_id: str,
    reference: str,
    amount: int,
    currency: str,
    purpose: str = REATTEMPT_PURPOSE,
) -> PaymentTransaction:
    """Insert a pending row and commit it immediately."""
    txn = PaymentTransaction(
        user_id=user_id,
        reference=reference,
        amount=amount,
        currency=currency,
        purpose=purpose,
        status=TransactionStatus.PENDING.value,
    )
    db.add(txn)
    db.commit()
    db.refresh(txn)
    return txn


def get_transaction(db: Session, reference: str) -> PaymentTransaction | None:
    return db.execute(
        select(PaymentTransaction).where(PaymentTransaction.reference == reference)
    ).scalar_one_or_none()


def list_transactions(db: Session, user_id: str, purpose: Optional[str] = None) -> List[PaymentTransaction]:
    stmt = select(PaymentTransaction).where(PaymentTransaction.user_id == user_id)
    if purpose:
        stmt = stmt.where(PaymentTransaction.purpose == purpose)
    return list(db.execute(stmt.order_by(PaymentTransaction.created_at, PaymentTransaction.id)).scalars())


def update_status(db: Session, reference: str, status: TransactionStatus, gateway_response: dict) -> int:
    """Write status and the latest gateway response in one statement. Returns rowcount."""
    result = db.execute(
        update(PaymentTransaction)
        .where(PaymentTransaction.reference == reference)
        .values(
            status=TransactionStatus(status).value,
            gateway_response=gateway_response,
            updated_at=datetime.utcnow(),
        )
    )
    db.commit()
    return result.rowcount


def mark_consumed(db: Session, reference: str, attempt_id: str) -> bool:
    """
    Claim a verified reattempt transaction for an attempt.

    Succeeds only if the row is still verified and unconsumed, so two
    requests racing for the same row cannot both win. Not committed here;
    the caller commits it together with the attempt row.
    """
    result = db.execute(
        update(PaymentTransaction)
        .where(
            PaymentTransaction.reference == reference,
            PaymentTransaction.status == TransactionStatus.VERIFIED.value,
            PaymentTransaction.purpose == REATTEMPT_PURPOSE,
            PaymentTransaction.consumed_at.is_(None),
        )
        .values(
            consumed_at=datetime.utcnow(),
            consumed_by_attempt_id=attempt_id,
            updated_at=datetime.utcnow(),
        )
    )
    return result.rowcount == 1
