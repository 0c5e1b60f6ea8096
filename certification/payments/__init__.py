"""
Reattempt Payment Module

Initiates payment transactions, reconciles them against the Paystack
gateway and gates paid reattempts on a verified, unconsumed transaction.
"""

from .config import PaymentSettings
from .gateway import PaystackGateway
from .gate import PaymentGate, can_start_paid_attempt

__all__ = [
    "PaymentSettings",
    "PaystackGateway",
    "PaymentGate",
    "can_start_paid_attempt",
]
