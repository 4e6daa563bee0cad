"""Agno-backed document AI: OCR, table extraction and summarization.

Each task runs through its own Agno agent with a structured output schema,
so the route handlers receive validated pydantic models rather than free
text. OCR and table extraction send rasterized pages to a vision model;
summarization sends the extracted text layer. Rendering and parsing run in
a worker thread.
"""

import asyncio
import logging

from agno.agent import Agent
from agno.media import Image
from agno.models.openai import OpenAIChat
from pydantic import BaseModel, ValidationError

from src.ai.config import DocumentAIConfig, get_document_ai_config
from src.models.schemas import OcrResult, Summary, TableExtraction
from src.parsing.pdf_parser import PDFParseError, parse_pdf
from src.rendering.page_renderer import PageRenderError, render_pdf_pages

logger = logging.getLogger(__name__)

# Characters of extracted text sent to the summarizer.
MAX_SUMMARY_CHARS = 60000

OCR_INSTRUCTIONS = [
    "You are an expert at Optical Character Recognition (OCR).",
    "Extract all text from the provided document pages, in reading order.",
    "Keep paragraph breaks. Do not add commentary.",
]

TABLE_INSTRUCTIONS = [
    "You are an expert at data extraction.",
    "Find every table in the provided document pages and return it as CSV.",
    "Use the first row of each table as its header.",
    "Separate multiple tables with a blank line.",
    "If there are no tables, return an empty string.",
]

SUMMARY_INSTRUCTIONS = [
    "You are an expert at summarizing documents.",
    "Provide a concise summary of the document text you are given.",
    "Focus on the main points and key information.",
]


class DocumentAIError(Exception):
    """Raised when a document AI task cannot produce a result."""

    pass


class DocumentAIService:
    """Runs the document AI prompts against an OpenAI-compatible model."""

    def __init__(self, config: DocumentAIConfig | None = None) -> None:
        """Initialize the service.

        Args:
            config: Optional configuration. Loads from environment if not
                provided.
        """
        self._config = config or get_document_ai_config()
        self._ocr_agent = self._create_agent(OCR_INSTRUCTIONS, OcrResult)
        self._table_agent = self._create_agent(TABLE_INSTRUCTIONS, TableExtraction)
        self._summary_agent = self._create_agent(SUMMARY_INSTRUCTIONS, Summary)

    def _create_agent(self, instructions: list[str], schema: type[BaseModel]) -> Agent:
        model = OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )
        return Agent(
            model=model,
            instructions=instructions,
            output_schema=schema,
            markdown=False,
        )

    def _page_images(self, pdf_bytes: bytes) -> list[Image]:
        try:
            pages = render_pdf_pages(pdf_bytes, scale=self._config.render_scale)
        except (PDFParseError, PageRenderError) as e:
            raise DocumentAIError(str(e)) from e

        images = [Image(content=page.data, format="jpeg") for page in pages if page.ok]
        if not images:
            raise DocumentAIError("No page of the document could be rendered")
        if len(images) > self._config.max_pages:
            logger.warning(
                f"Sending first {self._config.max_pages} of {len(images)} pages to the model"
            )
            images = images[: self._config.max_pages]
        return images

    async def _run(
        self,
        agent: Agent,
        schema: type[BaseModel],
        prompt: str,
        images: list[Image] | None = None,
    ) -> BaseModel:
        try:
            response = await agent.arun(prompt, images=images)
        except Exception as e:
            logger.error(f"Model call failed: {e}")
            raise DocumentAIError(f"Model call failed: {e}") from e

        content = getattr(response, "content", None)
        if isinstance(content, schema):
            return content
        if isinstance(content, str):
            try:
                return schema.model_validate_json(content)
            except ValidationError as e:
                raise DocumentAIError("Model returned an unexpected response") from e
        raise DocumentAIError("Model returned no result")

    async def ocr_pdf(self, pdf_bytes: bytes) -> OcrResult:
        """Recognize the text of a (typically scanned) PDF.

        Raises:
            DocumentAIError: If the PDF cannot be rendered or the model fails.
        """
        images = await asyncio.to_thread(self._page_images, pdf_bytes)
        result = await self._run(
            self._ocr_agent, OcrResult, "Extract the text from these document pages.", images
        )
        logger.info(f"OCR extracted {len(result.text)} characters from {len(images)} pages")
        return result

    async def extract_tables(self, pdf_bytes: bytes) -> TableExtraction:
        """Extract the tables of a PDF as CSV.

        Raises:
            DocumentAIError: If the PDF cannot be rendered or the model fails.
        """
        images = await asyncio.to_thread(self._page_images, pdf_bytes)
        result = await self._run(
            self._table_agent,
            TableExtraction,
            "Extract all tables from these document pages as CSV.",
            images,
        )
        logger.info(f"Table extraction returned {len(result.csv)} characters of CSV")
        return result

    async def summarize_pdf(self, pdf_bytes: bytes) -> Summary:
        """Summarize the text layer of a PDF.

        Raises:
            DocumentAIError: If the PDF is invalid, has no text, or the model
                fails.
        """
        try:
            content = await asyncio.to_thread(parse_pdf, pdf_bytes)
        except PDFParseError as e:
            raise DocumentAIError(str(e)) from e

        text = content.text.strip()
        if not text:
            raise DocumentAIError("PDF has no extractable text; run OCR first")
        if len(text) > MAX_SUMMARY_CHARS:
            logger.info(f"Truncating {len(text)} characters to {MAX_SUMMARY_CHARS} for summary")
            text = text[:MAX_SUMMARY_CHARS]

        return await self._run(
            self._summary_agent,
            Summary,
            f"Summarize the following document:\n\n{text}",
        )


# Module-level singleton instance
_document_ai_service: DocumentAIService | None = None


def get_document_ai_service() -> DocumentAIService:
    """Get or create the global document AI service.

    Raises:
        DocumentAIError: If the model API key is not configured.
    """
    global _document_ai_service
    if _document_ai_service is None:
        try:
            _document_ai_service = DocumentAIService()
        except ValidationError as e:
            logger.error(f"Document AI is not configured: {e}")
            raise DocumentAIError("Document AI is not configured on the server") from e
    return _document_ai_service
