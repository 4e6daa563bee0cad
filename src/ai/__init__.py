"""Document AI prompts run through Agno.

Responsibilities:
    - OCR of scanned PDFs from rasterized pages
    - Table extraction to CSV
    - Document summarization from the text layer
"""

from src.ai.config import DocumentAIConfig, get_document_ai_config
from src.ai.document_ai import DocumentAIError, DocumentAIService, get_document_ai_service

__all__ = [
    "DocumentAIConfig",
    "DocumentAIError",
    "DocumentAIService",
    "get_document_ai_config",
    "get_document_ai_service",
]
