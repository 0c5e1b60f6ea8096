"""
Payment Gate

Decides whether a candidate may start a paid reattempt and reconciles
payment references against the gateway.

Flow:
1. initiate  - persist a pending row before the browser checkout starts
2. reconcile - verify the reference with the gateway, store verified/failed
3. consume   - claim one verified row when a reattempt starts
"""

import logging
import secrets
import time
from typing import Iterable, Optional
from sqlalchemy.orm import Session

from models.models import PaymentTransaction
from ..logic.contracts import ReconcileResult, PaymentStatus
from ..logic.constants import TransactionStatus, REATTEMPT_PURPOSE, GATEWAY_SUCCESS_STATUS
from ..errors import UnknownReference, PaymentRequired
from .config import PaymentSettings
from .gateway import PaystackGateway
from . import ledger

logger = logging.getLogger(__name__)


def generate_reference() -> str:
    """Time-based reference with a random suffix so two initiations in the same millisecond differ."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"


def can_start_paid_attempt(transactions: Iterable) -> bool:
    """
    True iff some transaction is a verified, unconsumed reattempt payment.

    Args:
        transactions: Ledger rows (anything with purpose, status, consumed_at)
    """
    return any(
        txn.purpose == REATTEMPT_PURPOSE
        and txn.status == TransactionStatus.VERIFIED.value
        and txn.consumed_at is None
        for txn in transactions
    )


class PaymentGate:
    """
    Reattempt payment gate backed by the transaction ledger.

    The ledger is the only source of truth; clients never report payment
    state themselves.
    """

    def __init__(self, settings: Optional[PaymentSettings] = None, gateway=None):
        """
        Args:
            settings: Payment configuration. Read from the environment if None.
            gateway: Object with an async ``verify(reference)``. Paystack if None.
        """
        self.settings = settings or PaymentSettings.from_env()
        self.gateway = gateway or PaystackGateway(self.settings)

    def status(self) -> PaymentStatus:
        return PaymentStatus(
            enabled=self.settings.payments_enabled,
            public_key=self.settings.public_key if self.settings.payments_enabled else None,
            amount=self.settings.reattempt_amount,
            currency=self.settings.currency,
            reason=self.settings.disabled_reason(),
        )

    def initiate(
        self,
        db: Session,
        user_id: str,
        amount: Optional[int] = None,
        purpose: str = REATTEMPT_PURPOSE,
    ) -> PaymentTransaction:
        """
        Create a pending transaction with a fresh reference.

        The row is committed before returning so the gateway callback
        always has something to reconcile.

        Raises:
            ConfigurationError: payments are disabled
        """
        self.settings.require_public_key()
        if amount is not None and amount <= 0:
            raise ValueError("amount must be positive")

        txn = ledger.insert_transaction(
            db,
            user_id=user_id,
            reference=generate_reference(),
            amount=amount if amount is not None else self.settings.reattempt_amount,
            currency=self.settings.currency,
            purpose=purpose,
        )
        logger.info(f"Initiated {purpose} payment {txn.reference} for user {user_id} ({txn.amount} {txn.currency})")
        return txn

    async def reconcile(self, db: Session, reference: str, owner_id: Optional[str] = None) -> ReconcileResult:
        """
        Verify a reference with the gateway and record the outcome.

        Gateway "success" becomes verified, anything else failed. Safe to
        repeat; each call stores the latest gateway response.

        Raises:
            ConfigurationError: secret key missing (checked before any lookup)
            UnknownReference: no ledger row for the reference (or not owned by owner_id)
            GatewayError: gateway unreachable or non-2xx; row left unchanged
        """
        self.settings.require_secret_key()

        txn = ledger.get_transaction(db, reference)
        if txn is None or (owner_id is not None and txn.user_id != owner_id):
            logger.info(f"Reconcile requested for unknown reference {reference}")
            raise UnknownReference(reference)
        expected_amount = txn.amount

        verification = await self.gateway.verify(reference)

        if verification.status == GATEWAY_SUCCESS_STATUS:
            new_status = TransactionStatus.VERIFIED
        else:
            new_status = TransactionStatus.FAILED

        if new_status is TransactionStatus.VERIFIED and verification.amount != expected_amount:
            logger.warning(
                f"Payment {reference} verified with amount {verification.amount}, ledger expects {expected_amount}"
            )

        ledger.update_status(db, reference, new_status, verification.raw)
        logger.info(f"Reconciled payment {reference}: gateway={verification.status} stored={new_status.value}")

        return ReconcileResult(
            reference=reference,
            status=new_status,
            gateway_status=verification.status,
            amount=verification.amount,
        )

    def can_start_attempt(self, db: Session, user_id: str) -> bool:
        return can_start_paid_attempt(ledger.list_transactions(db, user_id, REATTEMPT_PURPOSE))

    def consume_reattempt(self, db: Session, user_id: str, attempt_id: str) -> str:
        """
        Claim one verified, unconsumed reattempt payment for an attempt.

        Returns:
            The consumed reference

        Raises:
            PaymentRequired: nothing left to consume
        """
        for txn in ledger.list_transactions(db, user_id, REATTEMPT_PURPOSE):
            if txn.status != TransactionStatus.VERIFIED.value or txn.consumed_at is not None:
                continue
            reference = txn.reference
            if ledger.mark_consumed(db, reference, attempt_id):
                logger.info(f"Payment {reference} consumed by attempt {attempt_id}")
                return reference
            # another request claimed this row first

        raise PaymentRequired("A verified reattempt payment is required to start a new test")
