"""Pydantic models for API requests and responses.

Provides type safety, validation, and automatic OpenAPI documentation.
Payment payloads keep the storefront's camelCase field names on the wire.

Models:
    - PaymentRequest / PaymentRedirectResponse: PhonePe checkout
    - DocumentQuoteRequest / PhotoQuoteRequest / PriceQuote: print pricing
    - RenderResponse: rasterized pages
    - OcrResult / TableExtraction / Summary: document AI outputs
"""

from src.models.schemas import (
    AmountRequest,
    DeliveryAddress,
    DocumentQuoteRequest,
    HtmlToPdfRequest,
    OcrResult,
    OrderItem,
    PaymentRedirectResponse,
    PaymentRequest,
    PaymentStatus,
    PaymentStatusResponse,
    PDFInfoResponse,
    PhotoQuoteRequest,
    PriceQuote,
    RazorpayOrderResponse,
    RenderedPageResponse,
    RenderResponse,
    StripeIntentResponse,
    Summary,
    TableExtraction,
)

__all__ = [
    "AmountRequest",
    "DeliveryAddress",
    "DocumentQuoteRequest",
    "HtmlToPdfRequest",
    "OcrResult",
    "OrderItem",
    "PDFInfoResponse",
    "PaymentRedirectResponse",
    "PaymentRequest",
    "PaymentStatus",
    "PaymentStatusResponse",
    "PhotoQuoteRequest",
    "PriceQuote",
    "RazorpayOrderResponse",
    "RenderResponse",
    "RenderedPageResponse",
    "StripeIntentResponse",
    "Summary",
    "TableExtraction",
]
