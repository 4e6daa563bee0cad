"""PhonePe pay-page client.

Builds the signed pay request and returns the URL the browser is sent to.
The payment result arrives later on the server callback.
"""

import json
import logging
from typing import Any

import httpx

from src.payments.checksum import PAY_API_PATH, encode_payload, request_checksum
from src.payments.config import PaymentConfig
from src.payments.errors import GatewayConfigError, GatewayError

logger = logging.getLogger(__name__)

DEFAULT_MOBILE_NUMBER = "9999999999"
REQUEST_TIMEOUT = 30.0


def to_paise(amount: float) -> int:
    return int(round(amount * 100))


def _redirect_url(data: dict[str, Any]) -> str | None:
    """Dig ``data.instrumentResponse.redirectInfo.url`` out of a pay reply."""
    node: Any = data
    for key in ("data", "instrumentResponse", "redirectInfo", "url"):
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node if isinstance(node, str) and node else None


class PhonePeClient:
    """Thin async wrapper around the PhonePe ``/pg/v1/pay`` endpoint."""

    def __init__(self, config: PaymentConfig, client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._client = client

    def ensure_configured(self) -> None:
        """Raise GatewayConfigError if any PhonePe credential is missing."""
        if not self._config.phonepe_configured:
            logger.error("PhonePe environment variables are not set correctly on the server.")
            raise GatewayConfigError(
                "Payment provider not configured correctly on the server. Please contact support."
            )

    def build_payload(
        self,
        *,
        transaction_id: str,
        user_id: str,
        amount: float,
        mobile_number: str | None,
    ) -> dict[str, Any]:
        base = self._config.public_base_url
        return {
            "merchantId": self._config.phonepe_merchant_id,
            "merchantTransactionId": transaction_id,
            "merchantUserId": user_id,
            "amount": to_paise(amount),
            "redirectUrl": f"{base}/payment/{transaction_id}",
            "redirectMode": "POST",
            "callbackUrl": f"{base}/api/phonepe-callback",
            "mobileNumber": mobile_number or DEFAULT_MOBILE_NUMBER,
            "paymentInstrument": {"type": "PAY_PAGE"},
        }

    async def _post(self, url: str, body: dict[str, Any], headers: dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(url, json=body, headers=headers)
        async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
            return await client.post(url, json=body, headers=headers)

    async def create_payment(
        self,
        *,
        transaction_id: str,
        user_id: str,
        amount: float,
        mobile_number: str | None = None,
    ) -> str:
        """Register a payment and return the pay-page redirect URL.

        Raises:
            GatewayConfigError: If credentials are missing.
            GatewayError: If the gateway rejects the request or is unreachable.
        """
        self.ensure_configured()

        payload = self.build_payload(
            transaction_id=transaction_id,
            user_id=user_id,
            amount=amount,
            mobile_number=mobile_number,
        )
        base64_payload = encode_payload(payload)
        headers = {
            "Content-Type": "application/json",
            "X-VERIFY": request_checksum(
                base64_payload,
                PAY_API_PATH,
                self._config.phonepe_salt_key,
                self._config.phonepe_salt_index,
            ),
            "accept": "application/json",
        }
        url = f"{self._config.phonepe_host_url}{PAY_API_PATH}"

        try:
            response = await self._post(url, {"request": base64_payload}, headers)
        except httpx.HTTPError as e:
            raise GatewayError(f"Gateway request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {"raw": response.text}
        if not isinstance(data, dict):
            data = {"raw": data}

        redirect = _redirect_url(data)
        if data.get("success") and redirect:
            logger.info(f"PhonePe payment created for transaction {transaction_id}")
            return redirect

        logger.error(f"PhonePe API Error: {json.dumps(data)[:800]}")
        status = response.status_code if response.status_code >= 400 else 500
        raise GatewayError(
            data.get("message") or "Failed to create PhonePe payment",
            status_code=status,
            details=data,
        )
