"""Checkout flows and print pricing.

Responsibilities:
    - PhonePe pay-page creation and signed callback reconciliation
    - Stripe payment intents and Razorpay orders
    - Server-side print/delivery price quotes
"""

from src.payments.config import PaymentConfig, get_payment_config
from src.payments.errors import (
    ChecksumMismatchError,
    GatewayConfigError,
    GatewayError,
    InvalidOrderError,
    MalformedCallbackError,
    PaymentError,
    UnknownTransactionError,
)
from src.payments.phonepe import PhonePeClient
from src.payments.pricing import PricingError, quote_document, quote_photos
from src.payments.razorpay import create_razorpay_order
from src.payments.reconciliation import CallbackOutcome, PaymentReconciler
from src.payments.stripe_intents import create_payment_intent

__all__ = [
    "CallbackOutcome",
    "ChecksumMismatchError",
    "GatewayConfigError",
    "GatewayError",
    "InvalidOrderError",
    "MalformedCallbackError",
    "PaymentConfig",
    "PaymentError",
    "PaymentReconciler",
    "PhonePeClient",
    "PricingError",
    "UnknownTransactionError",
    "create_payment_intent",
    "create_razorpay_order",
    "get_payment_config",
    "quote_document",
    "quote_photos",
]
