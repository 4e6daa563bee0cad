"""Razorpay order creation over the REST API."""

import logging
import secrets
from typing import Any

import httpx

from src.payments.config import PaymentConfig
from src.payments.errors import GatewayConfigError, GatewayError, InvalidOrderError
from src.payments.phonepe import REQUEST_TIMEOUT, to_paise

logger = logging.getLogger(__name__)


def new_receipt_id() -> str:
    return f"receipt_order_{secrets.token_hex(16)}"


async def create_razorpay_order(
    amount: float,
    config: PaymentConfig,
    client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """Create a Razorpay order for ``amount`` rupees.

    Raises:
        InvalidOrderError: If the amount is below 1, before any request.
        GatewayConfigError: If the key pair is missing.
        GatewayError: If Razorpay rejects the request.
    """
    if not amount or amount < 1:
        raise InvalidOrderError("Invalid amount")
    if not config.razorpay_configured:
        raise GatewayConfigError("Razorpay keys are not configured")

    body = {
        "amount": to_paise(amount),
        "currency": config.currency,
        "receipt": new_receipt_id(),
    }
    url = f"{config.razorpay_base_url}/v1/orders"
    auth = (config.razorpay_key_id, config.razorpay_key_secret)

    try:
        if client is not None:
            response = await client.post(url, json=body, auth=auth)
        else:
            async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as owned:
                response = await owned.post(url, json=body, auth=auth)
    except httpx.HTTPError as e:
        logger.error(f"Error creating Razorpay order: {e}")
        raise GatewayError("Failed to create Razorpay order") from e

    if not response.is_success:
        logger.error(f"Error creating Razorpay order: HTTP {response.status_code} {response.text[:800]}")
        raise GatewayError("Failed to create Razorpay order")

    order = response.json()
    logger.info(f"Razorpay order {order.get('id')} created")
    return order
