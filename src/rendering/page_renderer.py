"""PDF page rasterization with PyMuPDF.

Renders every page of a document to an encoded bitmap, strictly in page
order and on the calling thread. A page that fails to render is kept as an
empty placeholder so callers can still index results by page number.
"""

import base64
import logging

import pymupdf
from pydantic import BaseModel, Field

from src.parsing.pdf_parser import validate_pdf_bytes

logger = logging.getLogger(__name__)

DEFAULT_SCALE = 3.0
THUMBNAIL_SCALE = 0.5

_FORMATS = {
    "jpeg": ("jpeg", "image/jpeg"),
    "jpg": ("jpeg", "image/jpeg"),
    "png": ("png", "image/png"),
}


class RenderedPage(BaseModel):
    """A single rasterized page.

    Attributes:
        page_number: 1-based page number in the source document.
        mime_type: MIME type of ``data``.
        data: Encoded image bytes, empty when rendering failed.
        width: Bitmap width in pixels.
        height: Bitmap height in pixels.
        error: Reason the page could not be rendered, if any.
    """

    page_number: int = Field(ge=1)
    mime_type: str
    data: bytes = b""
    width: int = 0
    height: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return bool(self.data)

    def data_url(self) -> str:
        """Return the image as a ``data:`` URL, or "" for a placeholder."""
        if not self.data:
            return ""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


class PageRenderError(Exception):
    """Raised when a document cannot be rendered at all."""

    pass


def _render_page(page: pymupdf.Page, matrix: pymupdf.Matrix) -> pymupdf.Pixmap:
    pix = page.get_pixmap(matrix=matrix, alpha=False)
    if pix.width == 0 or pix.height == 0:
        raise PageRenderError("Empty drawing surface")
    return pix


def render_pdf_pages(
    pdf_bytes: bytes,
    scale: float = DEFAULT_SCALE,
    image_format: str = "jpeg",
) -> list[RenderedPage]:
    """Render every page of a PDF to an image.

    Args:
        pdf_bytes: Raw bytes of the PDF document.
        scale: Zoom factor applied to the page's natural size (72 dpi).
        image_format: ``jpeg`` (or ``jpg``) or ``png``.

    Returns:
        One RenderedPage per page, in page order.

    Raises:
        PDFParseError: If the bytes are not a valid PDF.
        PageRenderError: If the format or scale is unsupported or the
            document cannot be opened.
    """
    fmt = _FORMATS.get(image_format.lower())
    if fmt is None:
        raise PageRenderError(f"Unsupported image format: {image_format}")
    if scale <= 0:
        raise PageRenderError("Scale must be positive")

    validate_pdf_bytes(pdf_bytes)
    output, mime_type = fmt
    matrix = pymupdf.Matrix(scale, scale)

    try:
        doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        raise PageRenderError(f"Failed to open PDF: {e}") from e

    rendered: list[RenderedPage] = []
    with doc:
        if doc.needs_pass:
            raise PageRenderError("PDF is encrypted; unlock it before rendering")

        for index in range(doc.page_count):
            page_number = index + 1
            try:
                pix = _render_page(doc.load_page(index), matrix)
                rendered.append(
                    RenderedPage(
                        page_number=page_number,
                        mime_type=mime_type,
                        data=pix.tobytes(output),
                        width=pix.width,
                        height=pix.height,
                    )
                )
            except Exception as e:
                logger.warning(f"Error rendering page {page_number}: {e}")
                rendered.append(
                    RenderedPage(page_number=page_number, mime_type=mime_type, error=str(e))
                )

    logger.info(f"Rendered {len(rendered)} page(s) at scale {scale}")
    return rendered


def render_page_thumbnails(pdf_bytes: bytes) -> list[RenderedPage]:
    """Render small PNG previews of every page."""
    return render_pdf_pages(pdf_bytes, scale=THUMBNAIL_SCALE, image_format="png")
