"""Payment gateway configuration with environment variable loading.

Gateway credentials are optional at load time: a missing credential only
fails the request that needs it, so the PDF tools keep working on a
deployment without payments configured.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


class PaymentConfig(BaseModel):
    """Configuration for PhonePe, Stripe and Razorpay.

    Attributes:
        phonepe_host_url: PhonePe API host (sandbox or production).
        phonepe_merchant_id: Merchant id issued by PhonePe.
        phonepe_salt_key: Shared secret used for X-VERIFY checksums.
        phonepe_salt_index: Index of the salt key, appended to checksums.
        public_base_url: Public URL of this deployment, used to build the
            redirect and callback URLs handed to the gateway.
        stripe_secret_key: Stripe secret API key.
        razorpay_key_id: Razorpay key id.
        razorpay_key_secret: Razorpay key secret.
        razorpay_base_url: Razorpay REST API base URL.
        currency: ISO currency code for every gateway.
    """

    phonepe_host_url: str = Field(default_factory=lambda: os.getenv("PHONEPE_HOST_URL", ""))
    phonepe_merchant_id: str = Field(default_factory=lambda: os.getenv("PHONEPE_MERCHANT_ID", ""))
    phonepe_salt_key: str = Field(default_factory=lambda: os.getenv("PHONEPE_SALT_KEY", ""))
    phonepe_salt_index: int = Field(
        default_factory=lambda: int(os.getenv("PHONEPE_SALT_INDEX", "1") or "1"),
        ge=1,
    )
    public_base_url: str = Field(
        default_factory=lambda: os.getenv("PUBLIC_BASE_URL", "http://localhost:8000")
    )
    stripe_secret_key: str = Field(default_factory=lambda: os.getenv("STRIPE_SECRET_KEY", ""))
    razorpay_key_id: str = Field(default_factory=lambda: os.getenv("RAZORPAY_KEY_ID", ""))
    razorpay_key_secret: str = Field(default_factory=lambda: os.getenv("RAZORPAY_KEY_SECRET", ""))
    razorpay_base_url: str = Field(
        default_factory=lambda: os.getenv("RAZORPAY_BASE_URL", "https://api.razorpay.com")
    )
    currency: str = Field(default="INR", min_length=3, max_length=3)

    @field_validator(
        "phonepe_host_url",
        "phonepe_merchant_id",
        "phonepe_salt_key",
        "stripe_secret_key",
        "razorpay_key_id",
        "razorpay_key_secret",
    )
    @classmethod
    def strip_credential(cls, v: str) -> str:
        """Strip whitespace picked up from .env files."""
        return v.strip()

    @field_validator("phonepe_host_url", "public_base_url", "razorpay_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs so paths can be appended directly."""
        return v.strip().rstrip("/")

    @property
    def phonepe_configured(self) -> bool:
        return bool(self.phonepe_host_url and self.phonepe_merchant_id and self.phonepe_salt_key)

    @property
    def razorpay_configured(self) -> bool:
        return bool(self.razorpay_key_id and self.razorpay_key_secret)


def get_payment_config() -> PaymentConfig:
    """Create payment configuration from environment.

    Returns:
        Configured PaymentConfig instance.
    """
    return PaymentConfig()
