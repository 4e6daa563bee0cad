from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CamelModel(BaseModel):
    """Base for payloads shared with the storefront, which speaks camelCase."""

    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------


class PaymentStatus(str, Enum):
    """Lifecycle of a pending payment. Only Created may change."""

    CREATED = "Created"
    SUCCESS = "Success"
    FAILED = "Failed"


class DeliveryAddress(CamelModel):
    """Where a print order is shipped."""

    name: str = ""
    address: str = ""
    pincode: str = ""
    email: str = ""
    mobile: str = ""


class OrderItem(CamelModel):
    """One line of a print order."""

    description: str
    quantity: int = Field(default=1, ge=1)
    amount: float = Field(default=0, ge=0)


class PaymentRequest(CamelModel):
    """Order submitted for payment through the PhonePe pay page.

    Amount and ids are checked by the reconciler rather than by the schema so
    that bad order data is answered with 400 before the gateway is called.

    Attributes:
        amount: Order total in rupees.
        user_id: Id of the paying user.
        merchant_transaction_id: Client-generated transaction id, also the
            id of the pending record and of the final order.
        delivery_address: Shipping address; its mobile number is sent to
            the gateway.
        items: Order lines copied onto the final order.
        order_type: ``Document``, ``Photo`` or ``Unknown``.
    """

    amount: float = 0
    user_id: str = Field(default="", alias="userId")
    merchant_transaction_id: str = Field(default="", alias="merchantTransactionId")
    delivery_address: DeliveryAddress | None = Field(default=None, alias="deliveryAddress")
    items: list[OrderItem] = Field(default_factory=list)
    order_type: str = Field(default="Unknown", alias="orderType")


class PaymentRedirectResponse(CamelModel):
    redirect_url: str = Field(..., alias="redirectUrl")


class PaymentStatusResponse(CamelModel):
    transaction_id: str = Field(..., alias="transactionId")
    status: PaymentStatus


class AmountRequest(BaseModel):
    """Bare amount used by the card and Razorpay checkouts."""

    amount: float = 0


class StripeIntentResponse(CamelModel):
    client_secret: str = Field(..., alias="clientSecret")


class RazorpayOrderResponse(BaseModel):
    order: dict[str, Any]


# ---------------------------------------------------------------------------
# Print pricing
# ---------------------------------------------------------------------------


class DocumentQuoteRequest(CamelModel):
    """Document print order: page split, copies and delivery."""

    total_pages: int = Field(..., ge=0, alias="totalPages")
    bw_pages: int = Field(default=0, ge=0, alias="bwPages")
    color_pages: int = Field(default=0, ge=0, alias="colorPages")
    copies: int = Field(default=1, ge=1)
    delivery_option: str = Field(default="standard", alias="deliveryOption")


class PhotoQuoteRequest(CamelModel):
    """Photo print order: photo size in cm, quantity, paper and delivery."""

    width_cm: float = Field(..., gt=0, alias="width")
    height_cm: float = Field(..., gt=0, alias="height")
    quantity: int = Field(..., ge=1)
    paper_type: str = Field(default="photo", alias="paperType")
    delivery_option: str = Field(default="standard", alias="deliveryOption")


class PriceQuote(CamelModel):
    """Computed price of a print order, in rupees."""

    order_type: str = Field(..., alias="orderType")
    lines: dict[str, float] = Field(default_factory=dict)
    subtotal: float = 0
    delivery_charge: float = Field(default=0, alias="deliveryCharge")
    total: float = 0
    photos_per_page: int | None = Field(default=None, alias="photosPerPage")
    pages_required: int | None = Field(default=None, alias="pagesRequired")
    unit_price: float | None = Field(default=None, alias="unitPrice")


# ---------------------------------------------------------------------------
# PDF tools
# ---------------------------------------------------------------------------


class PDFInfoResponse(BaseModel):
    """Page count and metadata of an uploaded PDF."""

    filename: str
    pages: int
    metadata: dict[str, str | None]
    encrypted: bool = False


class RenderedPageResponse(BaseModel):
    """A rendered page as delivered to the browser."""

    page_number: int
    mime_type: str
    width: int
    height: int
    data_url: str
    error: str | None = None


class RenderResponse(BaseModel):
    filename: str
    pages: int
    images: list[RenderedPageResponse]


class HtmlToPdfRequest(BaseModel):
    url: str = ""

    @field_validator("url", mode="before")
    @classmethod
    def strip_url(cls, v: str) -> str:
        """Strip whitespace from url before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


# ---------------------------------------------------------------------------
# Document AI
# ---------------------------------------------------------------------------


class OcrResult(BaseModel):
    """Text recognized in a document."""

    text: str = Field(..., description="The recognized text from the PDF document.")


class TableExtraction(BaseModel):
    """Tables found in a document, as CSV."""

    csv: str = Field(
        ...,
        description=(
            "The extracted table data in CSV format. If multiple tables exist, "
            "they are concatenated with a double newline in between."
        ),
    )


class Summary(BaseModel):
    """Short summary of a document."""

    summary: str = Field(..., description="A concise summary of the PDF document.")
