"""Unit tests for PDF parser module."""

import pytest
import pytest_check as check

from src.parsing.pdf_parser import MAX_FILE_SIZE, PDFParseError, load_pdf, parse_pdf
from src.tools.pdf_tools import protect_pdf


class TestParsePdfValid:
    """Tests for successful PDF parsing."""

    def test_extracts_text_and_page_count(self, sample_pdf: bytes) -> None:
        """Valid PDF returns text content and correct page count."""
        result = parse_pdf(sample_pdf)

        check.is_in("Page 1", result.text)
        check.is_in("Page 3", result.text)
        check.equal(result.pages, 3)
        check.is_false(result.encrypted)

    def test_returns_metadata_dict(self, sample_pdf: bytes) -> None:
        """Valid PDF returns metadata as dict."""
        result = parse_pdf(sample_pdf)

        check.is_instance(result.metadata, dict)
        check.equal(result.metadata.get("title"), "Sample Document")
        check.equal(result.metadata.get("author"), "Test Suite")

    def test_single_page_pdf_succeeds(self, make_pdf) -> None:
        """Single-page PDF parses without error."""
        result = parse_pdf(make_pdf(1))

        check.equal(result.pages, 1)


class TestParsePdfRejection:
    """Tests for PDF validation and rejection."""

    def test_rejects_empty_bytes(self) -> None:
        """Empty bytes raises PDFParseError."""
        with pytest.raises(PDFParseError, match="Empty file"):
            parse_pdf(b"")

    def test_rejects_non_pdf_file(self) -> None:
        """Non-PDF file raises PDFParseError."""
        with pytest.raises(PDFParseError, match="Invalid PDF"):
            parse_pdf(b"This is just a text file, not a PDF.")

    def test_rejects_oversized_file(self) -> None:
        """File over the upload limit raises PDFParseError."""
        oversized = b"%PDF-1.4" + b"\x00" * (MAX_FILE_SIZE + 1)

        with pytest.raises(PDFParseError, match="exceeds maximum"):
            parse_pdf(oversized)

    def test_rejects_truncated_pdf(self) -> None:
        """Truncated PDF raises PDFParseError."""
        with pytest.raises(PDFParseError, match="Corrupt|Failed|no pages"):
            parse_pdf(b"%PDF-1.4\n1 0 obj\n<<")


class TestLoadPdfEncrypted:
    """Tests for password-protected documents."""

    def test_requires_password(self, sample_pdf: bytes) -> None:
        protected = protect_pdf(sample_pdf, "secret")

        with pytest.raises(PDFParseError, match="password is required"):
            load_pdf(protected)

    def test_wrong_password_rejected(self, sample_pdf: bytes) -> None:
        protected = protect_pdf(sample_pdf, "secret")

        with pytest.raises(PDFParseError, match="Incorrect password"):
            load_pdf(protected, password="wrong")

    def test_correct_password_opens(self, sample_pdf: bytes) -> None:
        protected = protect_pdf(sample_pdf, "secret")

        reader = load_pdf(protected, password="secret")

        check.equal(len(reader.pages), 3)
        check.is_true(reader.is_encrypted)
