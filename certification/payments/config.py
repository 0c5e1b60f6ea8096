import os
from typing import Optional
from pydantic import BaseModel
from dotenv import load_dotenv

from ..logic.constants import (
    DEFAULT_REATTEMPT_AMOUNT,
    DEFAULT_CURRENCY,
    PUBLIC_KEY_PREFIXES,
)
from ..errors import ConfigurationError

load_dotenv()

PAYSTACK_BASE_URL = "https://api.paystack.co"


class PaymentSettings(BaseModel):
    """Gateway credentials and pricing, read from the environment."""
    public_key: Optional[str] = None
    secret_key: Optional[str] = None
    base_url: str = PAYSTACK_BASE_URL
    reattempt_amount: int = DEFAULT_REATTEMPT_AMOUNT
    currency: str = DEFAULT_CURRENCY
    timeout_seconds: float = 15.0

    @classmethod
    def from_env(cls) -> "PaymentSettings":
        return cls(
            public_key=(os.getenv("PAYSTACK_PUBLIC_KEY") or "").strip() or None,
            secret_key=(os.getenv("PAYSTACK_SECRET_KEY") or "").strip() or None,
            base_url=os.getenv("PAYSTACK_BASE_URL", PAYSTACK_BASE_URL),
            reattempt_amount=int(os.getenv("REATTEMPT_AMOUNT", str(DEFAULT_REATTEMPT_AMOUNT))),
            currency=os.getenv("PAYMENT_CURRENCY", DEFAULT_CURRENCY),
        )

    @property
    def payments_enabled(self) -> bool:
        return bool(self.public_key) and self.public_key.startswith(PUBLIC_KEY_PREFIXES)

    def disabled_reason(self) -> Optional[str]:
        if not self.public_key:
            return "Payment unavailable. Configure Paystack key."
        if not self.public_key.startswith(PUBLIC_KEY_PREFIXES):
            return "Payment unavailable. Paystack key must be a live or test public key."
        return None

    def require_public_key(self) -> str:
        if not self.payments_enabled:
            raise ConfigurationError(self.disabled_reason())
        return self.public_key

    def require_secret_key(self) -> str:
        if not self.secret_key:
            raise ConfigurationError("PAYSTACK_SECRET_KEY not configured")
        return self.secret_key

    def secret_preview(self) -> str:
        key = self.secret_key or ""
        return key[:10] + "..." if len(key) > 10 else "Not set"
