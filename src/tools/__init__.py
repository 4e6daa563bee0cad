"""PDF editing and conversion tools.

Responsibilities:
    - Organize: merge, split, extract and remove pages
    - Edit: rotate, page numbers, watermark
    - Optimize and secure: compress, protect, unlock
    - Convert: web page to PDF
"""

from src.tools.html_to_pdf import HtmlFetchError, html_to_text, html_url_to_pdf, text_to_pdf
from src.tools.pdf_tools import (
    PDFToolError,
    add_page_numbers,
    add_watermark,
    compress_pdf,
    extract_pages,
    merge_pdfs,
    parse_page_ranges,
    parse_page_selection,
    protect_pdf,
    remove_pages,
    rotate_pdf,
    split_pdf,
    unlock_pdf,
)

__all__ = [
    "HtmlFetchError",
    "PDFToolError",
    "add_page_numbers",
    "add_watermark",
    "compress_pdf",
    "extract_pages",
    "html_to_text",
    "html_url_to_pdf",
    "merge_pdfs",
    "parse_page_ranges",
    "parse_page_selection",
    "protect_pdf",
    "remove_pages",
    "rotate_pdf",
    "split_pdf",
    "text_to_pdf",
    "unlock_pdf",
]
