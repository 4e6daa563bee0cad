"""Page rasterization for previews, image export and OCR input."""

from src.rendering.page_renderer import (
    PageRenderError,
    RenderedPage,
    render_page_thumbnails,
    render_pdf_pages,
)

__all__ = ["PageRenderError", "RenderedPage", "render_page_thumbnails", "render_pdf_pages"]
