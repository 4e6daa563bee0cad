"""Page-level PDF tools.

Each tool takes raw PDF bytes and returns new PDF bytes. Structural edits
(merge, split, rotate, encrypt) go through pypdf; text overlays go through
PyMuPDF, which can measure and draw text.
"""

import io
import logging

import pymupdf
from pypdf import PdfReader, PdfWriter

from src.parsing.pdf_parser import PDFParseError, load_pdf, validate_pdf_bytes

logger = logging.getLogger(__name__)

PAGE_NUMBER_FONT_SIZE = 10
PAGE_NUMBER_MARGIN = 20


class PDFToolError(Exception):
    """Raised when a tool receives parameters it cannot apply."""

    pass


def parse_page_ranges(value: str, total_pages: int) -> list[tuple[int, int]]:
    """Parse a comma-separated list of 1-based page ranges.

    ``"1,3-5"`` on a 6-page document yields ``[(1, 1), (3, 5)]``. Ranges are
    clamped to the document; empty or out-of-range parts are dropped.

    Raises:
        PDFToolError: If a part is not a number or a range.
    """
    ranges: list[tuple[int, int]] = []
    for part in value.split(","):
        cleaned = part.strip()
        if not cleaned:
            continue
        start, _, end = cleaned.partition("-")
        try:
            start_i = max(1, int(start))
            end_i = min(total_pages, int(end or start))
        except ValueError as e:
            raise PDFToolError(f"Invalid page range: {cleaned!r}") from e
        if start_i <= end_i:
            ranges.append((start_i, end_i))
    return ranges


def parse_page_selection(value: str, total_pages: int) -> list[int]:
    """Expand a page-range string into an ordered list of page numbers."""
    pages: list[int] = []
    for start, end in parse_page_ranges(value, total_pages):
        pages.extend(range(start, end + 1))
    if not pages:
        raise PDFToolError("No valid pages selected")
    return pages


def _write(writer: PdfWriter) -> bytes:
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def _copy_metadata(writer: PdfWriter, reader: PdfReader) -> None:
    metadata = reader.metadata or {}
    if metadata:
        writer.add_metadata({k: str(v) for k, v in metadata.items()})


def merge_pdfs(documents: list[bytes]) -> bytes:
    """Concatenate documents in the given order."""
    if len(documents) < 2:
        raise PDFToolError("At least two PDF files are required to merge")

    writer = PdfWriter()
    for index, content in enumerate(documents, start=1):
        try:
            writer.append(load_pdf(content))
        except PDFParseError as e:
            raise PDFParseError(f"File {index}: {e}") from e

    logger.info(f"Merged {len(documents)} documents into {len(writer.pages)} pages")
    return _write(writer)


def extract_pages(content: bytes, pages: str) -> bytes:
    """Create a new document from the selected pages, in selection order."""
    reader = load_pdf(content)
    writer = PdfWriter()
    for number in parse_page_selection(pages, len(reader.pages)):
        writer.add_page(reader.pages[number - 1])
    _copy_metadata(writer, reader)
    return _write(writer)


def remove_pages(content: bytes, pages: str) -> bytes:
    """Drop the selected pages and keep the rest in their original order."""
    reader = load_pdf(content)
    total = len(reader.pages)
    doomed = set(parse_page_selection(pages, total))
    if len(doomed) >= total:
        raise PDFToolError("Cannot remove every page of the document")

    writer = PdfWriter()
    for number, page in enumerate(reader.pages, start=1):
        if number not in doomed:
            writer.add_page(page)
    _copy_metadata(writer, reader)
    return _write(writer)


def split_pdf(content: bytes, ranges: str | None = None) -> list[bytes]:
    """Split a document into one file per range, or one file per page."""
    reader = load_pdf(content)
    total = len(reader.pages)
    if ranges:
        parsed = parse_page_ranges(ranges, total)
        if not parsed:
            raise PDFToolError("No valid pages selected")
    else:
        parsed = [(n, n) for n in range(1, total + 1)]

    parts: list[bytes] = []
    for start, end in parsed:
        writer = PdfWriter()
        for number in range(start, end + 1):
            writer.add_page(reader.pages[number - 1])
        parts.append(_write(writer))
    return parts


def rotate_pdf(content: bytes, angle: int, pages: str | None = None) -> bytes:
    """Rotate pages clockwise by a multiple of 90 degrees."""
    if angle % 90 != 0:
        raise PDFToolError("Rotation angle must be a multiple of 90")

    reader = load_pdf(content)
    selected = set(parse_page_selection(pages, len(reader.pages))) if pages else None

    writer = PdfWriter()
    for number, page in enumerate(reader.pages, start=1):
        added = writer.add_page(page)
        if selected is None or number in selected:
            added.rotate(angle)
    _copy_metadata(writer, reader)
    return _write(writer)


def compress_pdf(content: bytes) -> bytes:
    """Losslessly compress content streams and drop duplicate objects."""
    reader = load_pdf(content)
    writer = PdfWriter(clone_from=reader)
    for page in writer.pages:
        page.compress_content_streams()
    writer.compress_identical_objects(remove_identicals=True, remove_orphans=True)

    compressed = _write(writer)
    logger.info(f"Compressed PDF from {len(content)} to {len(compressed)} bytes")
    return compressed


def protect_pdf(content: bytes, password: str) -> bytes:
    """Encrypt a document with AES-256 under ``password``."""
    if not password:
        raise PDFToolError("A password is required")

    reader = load_pdf(content)
    writer = PdfWriter()
    writer.append(reader)
    writer.encrypt(user_password=password, algorithm="AES-256")
    return _write(writer)


def unlock_pdf(content: bytes, password: str) -> bytes:
    """Decrypt a password-protected document and save it without encryption."""
    try:
        reader = load_pdf(content, password=password)
    except PDFParseError as e:
        raise PDFToolError(str(e)) from e
    if not reader.is_encrypted:
        raise PDFToolError("PDF is not encrypted")

    writer = PdfWriter()
    writer.append(reader)
    return _write(writer)


def _open_document(content: bytes) -> pymupdf.Document:
    validate_pdf_bytes(content)
    try:
        doc = pymupdf.open(stream=content, filetype="pdf")
    except Exception as e:
        raise PDFParseError(f"Failed to read PDF: {e}") from e
    if doc.needs_pass:
        doc.close()
        raise PDFParseError("PDF is encrypted; a password is required")
    return doc


def add_page_numbers(content: bytes, start: int = 1) -> bytes:
    """Stamp ``n / N`` centred at the bottom of every page."""
    with _open_document(content) as doc:
        total = doc.page_count + start - 1
        for index, page in enumerate(doc):
            label = f"{index + start} / {total}"
            width = pymupdf.get_text_length(label, fontname="helv", fontsize=PAGE_NUMBER_FONT_SIZE)
            rect = page.rect
            point = pymupdf.Point((rect.width - width) / 2, rect.height - PAGE_NUMBER_MARGIN)
            page.insert_text(
                point,
                label,
                fontname="helv",
                fontsize=PAGE_NUMBER_FONT_SIZE,
                color=(0, 0, 0),
            )
        return doc.tobytes(garbage=3, deflate=True)


def add_watermark(content: bytes, text: str, opacity: float = 0.3, font_size: int = 48) -> bytes:
    """Draw ``text`` diagonally across the centre of every page."""
    if not text.strip():
        raise PDFToolError("Watermark text is required")
    if not 0 < opacity <= 1:
        raise PDFToolError("Opacity must be between 0 and 1")

    with _open_document(content) as doc:
        width = pymupdf.get_text_length(text, fontname="helv", fontsize=font_size)
        for page in doc:
            center = pymupdf.Point(page.rect.width / 2, page.rect.height / 2)
            origin = pymupdf.Point(center.x - width / 2, center.y + font_size / 3)
            page.insert_text(
                origin,
                text,
                fontname="helv",
                fontsize=font_size,
                color=(0.5, 0.5, 0.5),
                fill_opacity=opacity,
                morph=(center, pymupdf.Matrix(-45)),
            )
        return doc.tobytes(garbage=3, deflate=True)
