"""Print and delivery pricing.

Prices are in rupees and match what the storefront shows. Quotes are
informational; the checkout charges the amount the storefront submits.
"""

import math

from src.models.schemas import DocumentQuoteRequest, PhotoQuoteRequest, PriceQuote

BW_PRICE_PER_PAGE = 3
COLOR_PRICE_PER_PAGE = 5

# Printable area of an A4 sheet, in cm.
A4_PRINTABLE_WIDTH = 20
A4_PRINTABLE_HEIGHT = 28

# (max area in cm², price per photo)
PHOTO_PRICE_TIERS: list[tuple[float, int]] = [
    (16, 5),
    (35, 8),
    (150, 10),
    (234, 12),
    (500, 15),
]
LARGE_PHOTO_PRICE = 20

PAPER_TYPE_ADDONS: dict[str, int] = {
    "photo": 0,
    "matte": 1,
    "glossy": 2,
    "premium": 3,
    "hd": 4,
}

DELIVERY_CHARGES: dict[str, int] = {
    "standard": 45,
    "express": 100,
}


class PricingError(ValueError):
    """Raised when an order cannot be priced."""

    pass


def price_per_photo(width_cm: float, height_cm: float) -> int:
    area = width_cm * height_cm
    for max_area, price in PHOTO_PRICE_TIERS:
        if area <= max_area:
            return price
    return LARGE_PHOTO_PRICE


def _delivery_charge(option: str) -> int:
    try:
        return DELIVERY_CHARGES[option]
    except KeyError as e:
        raise PricingError(f"Unknown delivery option: {option}") from e


def _with_delivery(quote: PriceQuote, option: str) -> PriceQuote:
    # An empty order is never charged for delivery.
    if quote.subtotal == 0:
        return quote
    charge = _delivery_charge(option)
    return quote.model_copy(update={"delivery_charge": charge, "total": quote.subtotal + charge})


def quote_document(order: DocumentQuoteRequest) -> PriceQuote:
    """Price a document print order.

    Raises:
        PricingError: If more pages are requested than the document has.
    """
    if order.bw_pages + order.color_pages > order.total_pages:
        raise PricingError("Page count exceeds total pages.")

    bw_cost = order.bw_pages * BW_PRICE_PER_PAGE
    color_cost = order.color_pages * COLOR_PRICE_PER_PAGE
    subtotal = (bw_cost + color_cost) * order.copies
    quote = PriceQuote(
        order_type="Document",
        lines={"bw": bw_cost, "color": color_cost},
        subtotal=subtotal,
    )
    return _with_delivery(quote, order.delivery_option)


def quote_photos(order: PhotoQuoteRequest) -> PriceQuote:
    """Price a photo print order laid out on A4 sheets.

    Raises:
        PricingError: If one photo does not fit on a sheet, or the paper type
            is unknown.
    """
    per_row = math.floor(A4_PRINTABLE_WIDTH / order.width_cm)
    per_column = math.floor(A4_PRINTABLE_HEIGHT / order.height_cm)
    photos_per_page = per_row * per_column
    if photos_per_page == 0:
        raise PricingError("Photo size is too large for an A4 sheet.")

    try:
        addon = PAPER_TYPE_ADDONS[order.paper_type]
    except KeyError as e:
        raise PricingError(f"Unknown paper type: {order.paper_type}") from e

    unit_price = price_per_photo(order.width_cm, order.height_cm) + addon
    quote = PriceQuote(
        order_type="Photo",
        lines={"photos": order.quantity * unit_price},
        subtotal=order.quantity * unit_price,
        photos_per_page=photos_per_page,
        pages_required=math.ceil(order.quantity / photos_per_page),
        unit_price=unit_price,
    )
    return _with_delivery(quote, order.delivery_option)
