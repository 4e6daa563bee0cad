"""Integration tests for the /tools endpoints.

Real uploads through the ASGI app with PDFs generated by PyMuPDF.
"""

import asyncio
import io
import time
import zipfile
from unittest.mock import AsyncMock, patch

import pymupdf
import pytest
import pytest_check as check
from httpx import AsyncClient
from pypdf import PdfReader

from src.models.schemas import PDFInfoResponse, RenderResponse
from src.tools.html_to_pdf import HtmlFetchError


def _upload(content: bytes, filename: str = "doc.pdf") -> dict:
    return {"file": (filename, content, "application/pdf")}


def _page_count(content: bytes) -> int:
    return len(PdfReader(io.BytesIO(content)).pages)


class TestHealth:
    async def test_health(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/health")

        check.equal(response.status_code, 200)
        check.equal(response.json()["status"], "healthy")


class TestInfo:
    """Tests for POST /tools/info."""

    async def test_info(self, async_client: AsyncClient, sample_pdf: bytes) -> None:
        response = await async_client.post("/tools/info", files=_upload(sample_pdf))

        check.equal(response.status_code, 200)
        data = PDFInfoResponse.model_validate(response.json())
        check.equal(data.filename, "doc.pdf")
        check.equal(data.pages, 3)

    async def test_rejects_non_pdf_extension(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/tools/info", files=_upload(b"hi", "notes.txt"))

        check.equal(response.status_code, 400)
        check.equal(response.json()["detail"], "Only PDF files are accepted")

    async def test_rejects_invalid_content(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/tools/info", files=_upload(b"not really a pdf"))

        check.equal(response.status_code, 400)
        check.is_in("Invalid PDF", response.json()["detail"])

    async def test_rejects_oversized_upload(self, async_client: AsyncClient) -> None:
        with patch("src.api.uploads.MAX_UPLOAD_SIZE", 1024):
            response = await async_client.post(
                "/tools/info", files=_upload(b"%PDF-1.4" + b"0" * 2048)
            )

        check.equal(response.status_code, 413)


class TestRender:
    """Tests for POST /tools/render."""

    async def test_render_returns_one_image_per_page(
        self, async_client: AsyncClient, make_pdf
    ) -> None:
        response = await async_client.post(
            "/tools/render", params={"scale": 0.5}, files=_upload(make_pdf(4))
        )

        check.equal(response.status_code, 200)
        data = RenderResponse.model_validate(response.json())
        check.equal(data.pages, 4)
        check.equal([img.page_number for img in data.images], [1, 2, 3, 4])
        check.is_true(data.images[0].data_url.startswith("data:image/jpeg;base64,"))

    async def test_render_png(self, async_client: AsyncClient, make_pdf) -> None:
        response = await async_client.post(
            "/tools/render", params={"scale": 0.5, "format": "png"}, files=_upload(make_pdf(1))
        )

        check.is_true(response.json()["images"][0]["data_url"].startswith("data:image/png"))

    async def test_render_bad_format(self, async_client: AsyncClient, make_pdf) -> None:
        response = await async_client.post(
            "/tools/render", params={"format": "bmp"}, files=_upload(make_pdf(1))
        )

        check.equal(response.status_code, 400)

    async def test_thumbnails(self, async_client: AsyncClient, make_pdf) -> None:
        response = await async_client.post("/tools/thumbnails", files=_upload(make_pdf(2)))

        check.equal(response.status_code, 200)
        check.equal(response.json()["pages"], 2)


class TestEditing:
    """Tests for the document-returning tools."""

    async def test_merge(self, async_client: AsyncClient, make_pdf) -> None:
        response = await async_client.post(
            "/tools/merge",
            files=[
                ("files", ("a.pdf", make_pdf(2), "application/pdf")),
                ("files", ("b.pdf", make_pdf(3), "application/pdf")),
            ],
        )

        check.equal(response.status_code, 200)
        check.equal(response.headers["content-type"], "application/pdf")
        check.equal(_page_count(response.content), 5)

    async def test_merge_single_file_rejected(self, async_client: AsyncClient, make_pdf) -> None:
        response = await async_client.post(
            "/tools/merge", files=[("files", ("a.pdf", make_pdf(1), "application/pdf"))]
        )

        check.equal(response.status_code, 400)

    async def test_split_returns_zip(self, async_client: AsyncClient, make_pdf) -> None:
        response = await async_client.post(
            "/tools/split", data={"ranges": "1-2,3"}, files=_upload(make_pdf(3), "report.pdf")
        )

        check.equal(response.status_code, 200)
        with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
            names = archive.namelist()
            check.equal(names, ["report-part1.pdf", "report-part2.pdf"])
            check.equal(_page_count(archive.read(names[0])), 2)

    async def test_extract_pages(self, async_client: AsyncClient, make_pdf) -> None:
        response = await async_client.post(
            "/tools/extract-pages", data={"pages": "2-3"}, files=_upload(make_pdf(4))
        )

        check.equal(response.status_code, 200)
        check.equal(_page_count(response.content), 2)
        check.is_in("doc-extracted.pdf", response.headers["content-disposition"])

    async def test_remove_pages_invalid_selection(
        self, async_client: AsyncClient, make_pdf
    ) -> None:
        response = await async_client.post(
            "/tools/remove-pages", data={"pages": "x"}, files=_upload(make_pdf(2))
        )

        check.equal(response.status_code, 400)

    async def test_rotate(self, async_client: AsyncClient, make_pdf) -> None:
        response = await async_client.post(
            "/tools/rotate", data={"angle": "180"}, files=_upload(make_pdf(2))
        )

        reader = PdfReader(io.BytesIO(response.content))
        check.equal([page.rotation for page in reader.pages], [180, 180])

    async def test_compress(self, async_client: AsyncClient, make_pdf) -> None:
        response = await async_client.post("/tools/compress", files=_upload(make_pdf(3)))

        check.equal(response.status_code, 200)
        check.equal(_page_count(response.content), 3)

    async def test_protect_and_unlock(self, async_client: AsyncClient, sample_pdf: bytes) -> None:
        protected = await async_client.post(
            "/tools/protect", data={"password": "pw"}, files=_upload(sample_pdf)
        )
        check.is_true(PdfReader(io.BytesIO(protected.content)).is_encrypted)

        wrong = await async_client.post(
            "/tools/unlock", data={"password": "nope"}, files=_upload(protected.content)
        )
        check.equal(wrong.status_code, 400)

        unlocked = await async_client.post(
            "/tools/unlock", data={"password": "pw"}, files=_upload(protected.content)
        )
        check.equal(unlocked.status_code, 200)
        check.is_false(PdfReader(io.BytesIO(unlocked.content)).is_encrypted)

    async def test_page_numbers(self, async_client: AsyncClient, make_pdf) -> None:
        response = await async_client.post("/tools/page-numbers", files=_upload(make_pdf(2)))

        with pymupdf.open(stream=response.content, filetype="pdf") as doc:
            check.is_in("2 / 2", doc[1].get_text())

    async def test_watermark(self, async_client: AsyncClient, make_pdf) -> None:
        response = await async_client.post(
            "/tools/watermark", data={"text": "DRAFT"}, files=_upload(make_pdf(1))
        )

        with pymupdf.open(stream=response.content, filetype="pdf") as doc:
            check.is_in("DRAFT", doc[0].get_text())

    async def test_slow_tool_does_not_block_event_loop(
        self, async_client: AsyncClient, make_pdf, loop_stall, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def slow_compress(content: bytes) -> bytes:
            time.sleep(0.3)
            return content

        monkeypatch.setattr("src.api.tools.compress_pdf", slow_compress)
        uploads = [make_pdf(1), make_pdf(2)]

        responses, stall = await loop_stall(
            asyncio.gather(
                *(async_client.post("/tools/compress", files=_upload(pdf)) for pdf in uploads)
            )
        )

        check.equal([response.status_code for response in responses], [200, 200])
        check.equal([_page_count(response.content) for response in responses], [1, 2])
        check.less(stall, 0.15)


class TestHtmlToPdf:
    """Tests for POST /tools/html-to-pdf."""

    async def test_missing_url(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/tools/html-to-pdf", json={"url": "  "})

        check.equal(response.status_code, 400)
        check.equal(response.json()["detail"], "URL is required")

    async def test_converts(self, async_client: AsyncClient, make_pdf) -> None:
        with patch(
            "src.api.tools.html_url_to_pdf", AsyncMock(return_value=make_pdf(1))
        ) as convert:
            response = await async_client.post(
                "/tools/html-to-pdf", json={"url": "https://example.test"}
            )

        check.equal(response.status_code, 200)
        check.equal(response.headers["content-type"], "application/pdf")
        convert.assert_awaited_once_with("https://example.test")

    async def test_fetch_failure(self, async_client: AsyncClient) -> None:
        with patch(
            "src.api.tools.html_url_to_pdf",
            AsyncMock(side_effect=HtmlFetchError("Failed to fetch the URL. Status: 503")),
        ):
            response = await async_client.post(
                "/tools/html-to-pdf", json={"url": "https://example.test"}
            )

        check.equal(response.status_code, 500)
