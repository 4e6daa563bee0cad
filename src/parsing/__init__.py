"""PDF loading utilities shared by every tool.

Responsibilities:
    - Upload validation (size limit, PDF header, page count)
    - Opening documents with pypdf, including password-protected ones
    - Text and metadata extraction for the summarizer
"""

from src.parsing.pdf_parser import (
    MAX_FILE_SIZE,
    PDFContent,
    PDFParseError,
    load_pdf,
    parse_pdf,
    validate_pdf_bytes,
)

__all__ = [
    "MAX_FILE_SIZE",
    "PDFContent",
    "PDFParseError",
    "load_pdf",
    "parse_pdf",
    "validate_pdf_bytes",
]
