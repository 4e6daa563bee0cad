"""Stripe card payments via PaymentIntents."""

import logging

import stripe

from src.payments.config import PaymentConfig
from src.payments.errors import GatewayConfigError, GatewayError, InvalidOrderError
from src.payments.phonepe import to_paise

logger = logging.getLogger(__name__)


def create_payment_intent(amount: float, config: PaymentConfig) -> str:
    """Create a PaymentIntent and return its client secret.

    Raises:
        InvalidOrderError: If the amount is below 1, before any request.
        GatewayConfigError: If no secret key is configured.
        GatewayError: If Stripe rejects the request.
    """
    if not amount or amount < 1:
        raise InvalidOrderError("Invalid amount")
    if not config.stripe_secret_key:
        raise GatewayConfigError("Stripe secret key is not configured")

    try:
        intent = stripe.PaymentIntent.create(
            api_key=config.stripe_secret_key,
            amount=to_paise(amount),
            currency=config.currency.lower(),
            automatic_payment_methods={"enabled": True},
        )
    except stripe.StripeError as e:
        logger.error(f"Error creating payment intent: {e}")
        raise GatewayError("Failed to create payment intent") from e

    logger.info(f"Stripe payment intent {intent.id} created")
    return intent.client_secret
