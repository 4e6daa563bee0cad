"""Checkout and pricing endpoints.

Endpoints:
    - POST /payments/quote/document: Price a document print order
    - POST /payments/quote/photo: Price a photo print order
    - POST /payments/phonepe: Create a pending payment, get the pay-page URL
    - POST /payments/phonepe/callback: PhonePe server callback
      (also served at /api/phonepe-callback, the URL sent to PhonePe)
    - POST /payments/stripe/intent: Stripe PaymentIntent client secret
    - POST /payments/razorpay/order: Razorpay order
    - GET /payments/{transaction_id}: Pending payment status
"""

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool

from src.models.schemas import (
    AmountRequest,
    DocumentQuoteRequest,
    PaymentRedirectResponse,
    PaymentRequest,
    PaymentStatusResponse,
    PhotoQuoteRequest,
    PriceQuote,
    RazorpayOrderResponse,
    StripeIntentResponse,
)
from src.payments.config import PaymentConfig, get_payment_config
from src.payments.errors import PaymentError
from src.payments.pricing import PricingError, quote_document, quote_photos
from src.payments.razorpay import create_razorpay_order
from src.payments.reconciliation import PaymentReconciler
from src.payments.stripe_intents import create_payment_intent
from src.storage.firestore import DocumentStore, get_document_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])

# PhonePe is given ``<base>/api/phonepe-callback`` as its callback URL.
callback_router = APIRouter(tags=["payments"])


def get_reconciler(
    store: DocumentStore = Depends(get_document_store),
    config: PaymentConfig = Depends(get_payment_config),
) -> PaymentReconciler:
    return PaymentReconciler(store, config)


def _payment_failure(error: PaymentError) -> HTTPException:
    if error.status_code >= 500:
        logger.error(f"Payment error: {error}")
    else:
        logger.warning(f"Payment request rejected: {error}")
    return HTTPException(status_code=error.status_code, detail=str(error))


@router.post("/quote/document", response_model=PriceQuote)
async def quote_document_order(order: DocumentQuoteRequest) -> PriceQuote:
    try:
        return quote_document(order)
    except PricingError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.post("/quote/photo", response_model=PriceQuote)
async def quote_photo_order(order: PhotoQuoteRequest) -> PriceQuote:
    try:
        return quote_photos(order)
    except PricingError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.post("/phonepe", response_model=PaymentRedirectResponse)
async def create_phonepe_payment(
    payment: PaymentRequest,
    reconciler: PaymentReconciler = Depends(get_reconciler),
) -> PaymentRedirectResponse:
    """Record a pending payment and return the PhonePe pay-page URL.

    Raises:
        400: Invalid amount or missing ids (no gateway call is made).
        409: Transaction id already used.
        500: Gateway not configured or gateway failure.
    """
    try:
        redirect_url = await reconciler.create_payment(payment)
    except PaymentError as e:
        raise _payment_failure(e) from e
    return PaymentRedirectResponse(redirect_url=redirect_url)


async def _phonepe_callback(
    request: Request,
    x_verify: str | None,
    reconciler: PaymentReconciler,
) -> PaymentRedirectResponse:
    body = await request.body()
    try:
        outcome = await run_in_threadpool(reconciler.handle_callback, body, x_verify)
    except PaymentError as e:
        raise _payment_failure(e) from e
    return PaymentRedirectResponse(redirect_url=outcome.redirect_url)


@router.post("/phonepe/callback", response_model=PaymentRedirectResponse)
async def phonepe_callback(
    request: Request,
    x_verify: str | None = Header(default=None),
    reconciler: PaymentReconciler = Depends(get_reconciler),
) -> PaymentRedirectResponse:
    """Verify and apply a PhonePe server callback.

    Raises:
        400: Malformed body or checksum mismatch (nothing is stored).
        404: Unknown transaction.
    """
    return await _phonepe_callback(request, x_verify, reconciler)


@callback_router.post("/api/phonepe-callback", response_model=PaymentRedirectResponse)
async def phonepe_callback_alias(
    request: Request,
    x_verify: str | None = Header(default=None),
    reconciler: PaymentReconciler = Depends(get_reconciler),
) -> PaymentRedirectResponse:
    return await _phonepe_callback(request, x_verify, reconciler)


@router.post("/stripe/intent", response_model=StripeIntentResponse)
def stripe_intent(
    payload: AmountRequest,
    config: PaymentConfig = Depends(get_payment_config),
) -> StripeIntentResponse:
    try:
        client_secret = create_payment_intent(payload.amount, config)
    except PaymentError as e:
        raise _payment_failure(e) from e
    return StripeIntentResponse(client_secret=client_secret)


@router.post("/razorpay/order", response_model=RazorpayOrderResponse)
async def razorpay_order(
    payload: AmountRequest,
    config: PaymentConfig = Depends(get_payment_config),
) -> RazorpayOrderResponse:
    try:
        order = await create_razorpay_order(payload.amount, config)
    except PaymentError as e:
        raise _payment_failure(e) from e
    return RazorpayOrderResponse(order=order)


@router.get("/{transaction_id}", response_model=PaymentStatusResponse)
def payment_status(
    transaction_id: str,
    reconciler: PaymentReconciler = Depends(get_reconciler),
) -> PaymentStatusResponse:
    try:
        payment_state = reconciler.get_status(transaction_id)
    except PaymentError as e:
        raise _payment_failure(e) from e
    return PaymentStatusResponse(transaction_id=transaction_id, status=payment_state)
