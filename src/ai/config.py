"""Document AI configuration with environment variable loading.

Supports OpenAI and OpenAI-compatible APIs via custom base URL. The model
must accept image input for OCR and table extraction.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


class DocumentAIConfig(BaseModel):
    """Configuration for the document AI prompts.

    Attributes:
        api_key: API key for model access.
        base_url: API base URL (None for OpenAI default).
        model_name: Vision-capable model identifier.
        temperature: Sampling temperature. Kept low, the prompts extract
            rather than invent.
        max_tokens: Maximum tokens in generated response.
        render_scale: Rasterization scale for pages sent to the model.
        max_pages: Pages beyond this are not sent to the model.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY", os.getenv("OPENAI_API_KEY", "")),
        description="API key for LLM provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o-mini"),
        description="Model to use",
    )
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4096, ge=1, le=128000)
    render_scale: float = Field(
        default_factory=lambda: float(os.getenv("AI_RENDER_SCALE", "1.5")),
        gt=0,
        le=4.0,
    )
    max_pages: int = Field(
        default_factory=lambda: int(os.getenv("AI_MAX_PAGES", "20")),
        ge=1,
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set LLM_API_KEY or OPENAI_API_KEY in .env"
            )
        return v.strip()


def get_document_ai_config() -> DocumentAIConfig:
    """Create document AI configuration from environment.

    Raises:
        ValueError: If no API key is set.
    """
    return DocumentAIConfig()
