"""PDF loading module using pypdf.

Validates raw upload bytes and opens them as a document shared by the
tools, the page renderer and the summarizer.
"""

import io
import logging
import os

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import FileNotDecryptedError, PdfReadError

logger = logging.getLogger(__name__)

# Constants
MAX_FILE_SIZE = int(os.getenv("MAX_UPLOAD_MB", "25")) * 1024 * 1024
PDF_MAGIC_BYTES = b"%PDF"


class PDFContent(BaseModel):
    """Summary of a loaded PDF file.

    Attributes:
        text: Combined text content from all pages.
        pages: Total number of pages in the document.
        metadata: Document metadata (title, author, etc.).
        encrypted: Whether the document requires a password.
    """

    text: str
    pages: int = Field(ge=0)
    metadata: dict[str, str | None]
    encrypted: bool = False


class PDFParseError(Exception):
    """Raised when PDF loading fails."""

    pass


def validate_pdf_bytes(file_content: bytes) -> None:
    """Validate PDF file content before opening it.

    Args:
        file_content: Raw bytes of the PDF file.

    Raises:
        PDFParseError: If validation fails.
    """
    if not file_content:
        raise PDFParseError("Empty file provided")

    if len(file_content) > MAX_FILE_SIZE:
        size_mb = len(file_content) / (1024 * 1024)
        limit_mb = MAX_FILE_SIZE // (1024 * 1024)
        raise PDFParseError(
            f"File size ({size_mb:.1f}MB) exceeds maximum allowed ({limit_mb}MB)"
        )

    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise PDFParseError("Invalid PDF: file does not start with PDF header")


def load_pdf(file_content: bytes, password: str | None = None) -> PdfReader:
    """Validate bytes and open them with pypdf.

    Args:
        file_content: Raw bytes of the PDF file.
        password: Optional password used to decrypt protected documents.

    Returns:
        An initialized PdfReader.

    Raises:
        PDFParseError: If the file is invalid, corrupt, has no pages or the
            password is wrong.
    """
    validate_pdf_bytes(file_content)

    try:
        reader = PdfReader(io.BytesIO(file_content))
    except PdfReadError as e:
        raise PDFParseError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFParseError(f"Failed to read PDF: {e}") from e

    if reader.is_encrypted and password is not None:
        try:
            if not reader.decrypt(password):
                raise PDFParseError("Incorrect password for encrypted PDF")
        except PdfReadError as e:
            raise PDFParseError(f"Failed to decrypt PDF: {e}") from e

    try:
        pages = len(reader.pages)
    except FileNotDecryptedError as e:
        raise PDFParseError("PDF is encrypted; a password is required") from e
    except PdfReadError as e:
        raise PDFParseError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFParseError(f"Failed to read PDF: {e}") from e

    if pages == 0:
        raise PDFParseError("PDF contains no pages")

    return reader


def _extract_metadata(reader: PdfReader) -> dict[str, str | None]:
    metadata: dict[str, str | None] = {}

    try:
        if reader.metadata:
            metadata["title"] = reader.metadata.get("/Title")
            metadata["author"] = reader.metadata.get("/Author")
            metadata["creator"] = reader.metadata.get("/Creator")
            metadata["producer"] = reader.metadata.get("/Producer")
    except Exception as e:
        logger.warning(f"Failed to extract some metadata: {e}")

    return {k: str(v) for k, v in metadata.items() if v is not None}


def parse_pdf(file_content: bytes) -> PDFContent:
    """Load a PDF and extract its text content.

    Pages whose text cannot be extracted are skipped with a warning; a
    scanned document yields empty text rather than an error.

    Args:
        file_content: Raw bytes of the PDF file.

    Returns:
        PDFContent with extracted text, page count, and metadata.

    Raises:
        PDFParseError: If the file is invalid, too large, empty, or corrupt.
    """
    reader = load_pdf(file_content)

    text_parts: list[str] = []
    for i, page in enumerate(reader.pages):
        try:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
        except Exception as e:
            logger.warning(f"Failed to extract text from page {i + 1}: {e}")
            continue

    text = "\n\n".join(text_parts)
    if not text.strip():
        logger.warning("PDF contains no extractable text (may be scanned/image-based)")

    return PDFContent(
        text=text,
        pages=len(reader.pages),
        metadata=_extract_metadata(reader),
        encrypted=reader.is_encrypted,
    )
