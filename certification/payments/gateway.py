"""
Paystack Gateway Client

Verify-by-reference against the Paystack REST API.
Only the verification call lives here; checkout runs in the browser.
"""

import logging
from typing import Optional
from urllib.parse import quote
import httpx

from ..logic.contracts import GatewayVerification
from ..errors import GatewayError
from .config import PaymentSettings

logger = logging.getLogger(__name__)


class PaystackGateway:
    def __init__(self, settings: PaymentSettings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    async def verify(self, reference: str) -> GatewayVerification:
        """
        Ask the gateway for the outcome of a transaction.

        Raises:
            ConfigurationError: secret key missing
            GatewayError: network failure, non-2xx status or unreadable body
        """
        secret = self.settings.require_secret_key()
        url = f"{self.settings.base_url.rstrip('/')}/transaction/verify/{quote(reference, safe='')}"
        headers = {
            "Authorization": f"Bearer {secret}",
            "Accept": "application/json",
            "User-Agent": "IELTSPro/1.0",
        }

        logger.info(f"Verifying Paystack reference {reference} using key {self.settings.secret_preview()}")
        try:
            async with httpx.AsyncClient(timeout=self.settings.timeout_seconds, transport=self.transport) as client:
                resp = await client.get(url, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Paystack verify request failed for {reference}: {e}")
            raise GatewayError(f"Payment gateway unreachable: {e}") from e

        logger.info(f"Paystack verify status for {reference}: {resp.status_code}")

        if resp.status_code == 401:
            raise GatewayError("Paystack rejected the secret key", status_code=resp.status_code)
        if not resp.is_success:
            raise GatewayError(
                f"Paystack verify error: {resp.status_code} - {resp.text}",
                status_code=resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError as e:
            raise GatewayError("Paystack returned an unreadable response", status_code=resp.status_code) from e
        if not isinstance(body, dict):
            raise GatewayError("Paystack returned an unexpected response", status_code=resp.status_code)

        data = body.get("data") or {}
        if not isinstance(data, dict):
            raise GatewayError("Paystack returned an unexpected response", status_code=resp.status_code)
        amount = data.get("amount")
        return GatewayVerification(
            status=data.get("status"),
            amount=int(amount) if isinstance(amount, (int, float)) else None,
            raw=body,
        )
