"""HTTP layer for the DocuEase backend.

Endpoints:
    - GET /health: Service health status
    - /tools/*: PDF rasterization and editing tools
    - /ai/*: OCR, table extraction and summarization
    - /payments/*: Print pricing, checkout and payment status
    - POST /api/phonepe-callback: PhonePe server callback
"""

from src.api.app import app, create_app

__all__ = ["app", "create_app"]
