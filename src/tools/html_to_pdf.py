"""Web page to PDF conversion.

Fetches a page, reduces the markup to plain text and lays that text out on
A4 pages with a measured line breaker. Layout, images and styles are not
preserved.
"""

import asyncio
import logging
import re

import httpx
import pymupdf

logger = logging.getLogger(__name__)

FONT_NAME = "helv"
FONT_SIZE = 10
MARGIN = 50
LINE_HEIGHT = FONT_SIZE * 1.2
FETCH_TIMEOUT = 30.0

_STYLE_RE = re.compile(r"<style[^>]*>[\s\S]*?</style>", re.IGNORECASE)
_SCRIPT_RE = re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE)
_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_P_END_RE = re.compile(r"</p>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")


class HtmlFetchError(Exception):
    """Raised when the source page cannot be downloaded."""

    pass


def html_to_text(html: str) -> str:
    """Strip markup down to newline-separated text."""
    text = _STYLE_RE.sub("", html)
    text = _SCRIPT_RE.sub("", text)
    text = _BR_RE.sub("\n", text)
    text = _P_END_RE.sub("\n", text)
    text = _TAG_RE.sub("", text)
    return text.replace("&nbsp;", " ").strip()


def _fit_prefix(line: str, max_width: float) -> int:
    """Return how many leading characters of ``line`` fit in ``max_width``."""
    if pymupdf.get_text_length(line, fontname=FONT_NAME, fontsize=FONT_SIZE) <= max_width:
        return len(line)

    count = 0
    while count < len(line):
        width = pymupdf.get_text_length(line[: count + 1], fontname=FONT_NAME, fontsize=FONT_SIZE)
        if width > max_width:
            break
        count += 1
    # A single glyph wider than the column still has to be placed.
    return max(count, 1)


def text_to_pdf(text: str) -> bytes:
    """Lay out plain text on as many A4 pages as it needs."""
    width, height = pymupdf.paper_size("a4")
    doc = pymupdf.open()
    page = doc.new_page(width=width, height=height)
    max_width = page.rect.width - MARGIN * 2
    y = MARGIN

    for line in text.split("\n"):
        current = line
        while current:
            if y > page.rect.height - MARGIN:
                page = doc.new_page(width=width, height=height)
                y = MARGIN

            cut = _fit_prefix(current, max_width)
            page.insert_text(
                pymupdf.Point(MARGIN, y + FONT_SIZE),
                current[:cut],
                fontname=FONT_NAME,
                fontsize=FONT_SIZE,
                color=(0, 0, 0),
            )
            y += LINE_HEIGHT
            current = current[cut:].strip()

    logger.info(f"Laid out {len(text)} characters on {doc.page_count} page(s)")
    data = doc.tobytes(garbage=3, deflate=True)
    doc.close()
    return data


async def fetch_html(url: str, client: httpx.AsyncClient | None = None) -> str:
    """Download a page body as text.

    Raises:
        HtmlFetchError: On transport errors or a non-2xx status.
    """
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=FETCH_TIMEOUT, follow_redirects=True)
    try:
        response = await client.get(url)
    except httpx.HTTPError as e:
        raise HtmlFetchError(f"Failed to fetch the URL: {e}") from e
    finally:
        if owns_client:
            await client.aclose()

    if not response.is_success:
        raise HtmlFetchError(f"Failed to fetch the URL. Status: {response.status_code}")
    return response.text


async def html_url_to_pdf(url: str, client: httpx.AsyncClient | None = None) -> bytes:
    """Fetch ``url`` and convert its text content to a PDF."""
    html = await fetch_html(url, client=client)
    return await asyncio.to_thread(text_to_pdf, html_to_text(html))
