"""DocuEase - backend for an online PDF toolbox with print ordering.

Combines FastAPI for HTTP, pypdf and PyMuPDF for document work, Agno for
document AI prompts, Firestore for order storage, and Pydantic for data
validation.

Components:
    - api: HTTP endpoints
    - parsing: PDF loading and validation
    - rendering: Page rasterization
    - tools: PDF editing operations and HTML to PDF
    - ai: OCR, table extraction and summarization
    - payments: Checkout flows, callback reconciliation and pricing
    - storage: Firestore document store
    - models: Request/response schemas
"""

__version__ = "0.1.0"
