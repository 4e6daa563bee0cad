"""PDF tool endpoints.

Every route takes a multipart upload and returns either JSON or the
processed document as a download.

Endpoints:
    - POST /tools/info: Page count and metadata
    - POST /tools/render: Rasterize pages to images
    - POST /tools/thumbnails: Small page previews
    - POST /tools/merge: Merge several PDFs in upload order
    - POST /tools/split: Split into ranges, returned as a zip
    - POST /tools/extract-pages, /tools/remove-pages, /tools/rotate
    - POST /tools/compress, /tools/protect, /tools/unlock
    - POST /tools/page-numbers, /tools/watermark
    - POST /tools/html-to-pdf: Render a web page's text as PDF
"""

import io
import logging
import zipfile
from collections.abc import Callable
from typing import Any, TypeVar

from fastapi import APIRouter, File, Form, HTTPException, Query, Response, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from src.api.uploads import output_filename, pdf_response_headers, read_pdf_upload
from src.models.schemas import (
    HtmlToPdfRequest,
    PDFInfoResponse,
    RenderedPageResponse,
    RenderResponse,
)
from src.parsing.pdf_parser import PDFParseError, parse_pdf
from src.rendering.page_renderer import (
    DEFAULT_SCALE,
    PageRenderError,
    RenderedPage,
    render_page_thumbnails,
    render_pdf_pages,
)
from src.tools.html_to_pdf import HtmlFetchError, html_url_to_pdf
from src.tools.pdf_tools import (
    PDFToolError,
    add_page_numbers,
    add_watermark,
    compress_pdf,
    extract_pages,
    merge_pdfs,
    protect_pdf,
    remove_pages,
    rotate_pdf,
    split_pdf,
    unlock_pdf,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tools", tags=["tools"])

PDF_MEDIA_TYPE = "application/pdf"

T = TypeVar("T")


async def _run_tool(filename: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking PDF operation in the threadpool.

    Loader and tool failures are mapped to 400 responses.
    """
    try:
        return await run_in_threadpool(func, *args, **kwargs)
    except (PDFParseError, PDFToolError, PageRenderError) as e:
        logger.warning(f"PDF tool error for {filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e


def _pdf_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=PDF_MEDIA_TYPE,
        headers=pdf_response_headers(filename),
    )


def _render_response(filename: str, pages: list[RenderedPage]) -> RenderResponse:
    return RenderResponse(
        filename=filename,
        pages=len(pages),
        images=[
            RenderedPageResponse(
                page_number=page.page_number,
                mime_type=page.mime_type,
                width=page.width,
                height=page.height,
                data_url=page.data_url(),
                error=page.error,
            )
            for page in pages
        ],
    )


def _zip_parts(filename: str, parts: list[bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for index, part in enumerate(parts, start=1):
            archive.writestr(output_filename(filename, f"part{index}"), part)
    return buffer.getvalue()


@router.post("/info", response_model=PDFInfoResponse)
async def pdf_info(file: UploadFile) -> PDFInfoResponse:
    """Return page count and metadata of an uploaded PDF."""
    filename, content = await read_pdf_upload(file)
    pdf_content = await _run_tool(filename, parse_pdf, content)
    return PDFInfoResponse(
        filename=filename,
        pages=pdf_content.pages,
        metadata=pdf_content.metadata,
        encrypted=pdf_content.encrypted,
    )


@router.post("/render", response_model=RenderResponse)
async def render_pages(
    file: UploadFile,
    scale: float = Query(default=DEFAULT_SCALE, gt=0, le=5.0),
    image_format: str = Query(default="jpeg", alias="format"),
) -> RenderResponse:
    """Rasterize every page of a PDF.

    Pages that fail to render are returned as placeholders with an empty
    ``data_url`` and an ``error`` so page numbering is preserved.
    """
    filename, content = await read_pdf_upload(file)
    pages = await _run_tool(
        filename, render_pdf_pages, content, scale=scale, image_format=image_format
    )
    logger.info(f"Rendered {len(pages)} pages of {filename}")
    return await run_in_threadpool(_render_response, filename, pages)


@router.post("/thumbnails", response_model=RenderResponse)
async def thumbnails(file: UploadFile) -> RenderResponse:
    filename, content = await read_pdf_upload(file)
    pages = await _run_tool(filename, render_page_thumbnails, content)
    return await run_in_threadpool(_render_response, filename, pages)


@router.post("/merge")
async def merge(files: list[UploadFile] = File(...)) -> Response:
    """Merge uploaded PDFs in upload order."""
    documents = []
    for upload in files:
        _, content = await read_pdf_upload(upload)
        documents.append(content)
    merged = await _run_tool("merge", merge_pdfs, documents)
    logger.info(f"Merged {len(documents)} documents")
    return _pdf_response(merged, "merged.pdf")


@router.post("/split")
async def split(file: UploadFile, ranges: str | None = Form(default=None)) -> Response:
    """Split a PDF into one document per range (default: per page), zipped."""
    filename, content = await read_pdf_upload(file)
    parts = await _run_tool(filename, split_pdf, content, ranges)
    archive = await run_in_threadpool(_zip_parts, filename, parts)
    return Response(
        content=archive,
        media_type="application/zip",
        headers=pdf_response_headers(output_filename(filename, "split", "zip")),
    )


@router.post("/extract-pages")
async def extract(file: UploadFile, pages: str = Form(...)) -> Response:
    filename, content = await read_pdf_upload(file)
    result = await _run_tool(filename, extract_pages, content, pages)
    return _pdf_response(result, output_filename(filename, "extracted"))


@router.post("/remove-pages")
async def remove(file: UploadFile, pages: str = Form(...)) -> Response:
    filename, content = await read_pdf_upload(file)
    result = await _run_tool(filename, remove_pages, content, pages)
    return _pdf_response(result, output_filename(filename, "trimmed"))


@router.post("/rotate")
async def rotate(
    file: UploadFile,
    angle: int = Form(...),
    pages: str | None = Form(default=None),
) -> Response:
    filename, content = await read_pdf_upload(file)
    result = await _run_tool(filename, rotate_pdf, content, angle, pages)
    return _pdf_response(result, output_filename(filename, "rotated"))


@router.post("/compress")
async def compress(file: UploadFile) -> Response:
    filename, content = await read_pdf_upload(file)
    result = await _run_tool(filename, compress_pdf, content)
    logger.info(f"Compressed {filename}: {len(content)} -> {len(result)} bytes")
    return _pdf_response(result, output_filename(filename, "compressed"))


@router.post("/protect")
async def protect(file: UploadFile, password: str = Form(...)) -> Response:
    filename, content = await read_pdf_upload(file)
    result = await _run_tool(filename, protect_pdf, content, password)
    return _pdf_response(result, output_filename(filename, "protected"))


@router.post("/unlock")
async def unlock(file: UploadFile, password: str = Form(...)) -> Response:
    filename, content = await read_pdf_upload(file)
    result = await _run_tool(filename, unlock_pdf, content, password)
    return _pdf_response(result, output_filename(filename, "unlocked"))


@router.post("/page-numbers")
async def page_numbers(file: UploadFile, start: int = Form(default=1, ge=0)) -> Response:
    filename, content = await read_pdf_upload(file)
    result = await _run_tool(filename, add_page_numbers, content, start)
    return _pdf_response(result, output_filename(filename, "numbered"))


@router.post("/watermark")
async def watermark(
    file: UploadFile,
    text: str = Form(...),
    opacity: float = Form(default=0.3, gt=0, le=1),
    font_size: int = Form(default=48, ge=6, le=200),
) -> Response:
    filename, content = await read_pdf_upload(file)
    result = await _run_tool(
        filename, add_watermark, content, text, opacity=opacity, font_size=font_size
    )
    return _pdf_response(result, output_filename(filename, "watermarked"))


@router.post("/html-to-pdf")
async def html_to_pdf(request: HtmlToPdfRequest) -> Response:
    """Fetch a web page and render its text content as a PDF."""
    if not request.url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="URL is required",
        )

    try:
        result = await html_url_to_pdf(request.url)
    except HtmlFetchError as e:
        logger.error(f"Error converting HTML to PDF: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to convert HTML to PDF",
        ) from e

    return _pdf_response(result, "converted.pdf")
