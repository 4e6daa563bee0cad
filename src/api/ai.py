"""Document AI endpoints.

Endpoints:
    - POST /ai/ocr: Recognize text in a scanned PDF
    - POST /ai/extract-tables: Extract tables as CSV
    - POST /ai/summarize: Summarize a PDF
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status

from src.ai.document_ai import DocumentAIError, DocumentAIService, get_document_ai_service
from src.api.uploads import read_pdf_upload
from src.models.schemas import OcrResult, Summary, TableExtraction

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


def document_ai_service() -> DocumentAIService:
    try:
        return get_document_ai_service()
    except DocumentAIError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        ) from e


def _ai_failure(task: str, filename: str, error: DocumentAIError) -> HTTPException:
    logger.error(f"{task} failed for {filename}: {error}")
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"{task} failed: {error}",
    )


@router.post("/ocr", response_model=OcrResult)
async def ocr(
    file: UploadFile,
    service: DocumentAIService = Depends(document_ai_service),
) -> OcrResult:
    """Recognize the text of an uploaded PDF from its rendered pages."""
    filename, content = await read_pdf_upload(file)
    try:
        return await service.ocr_pdf(content)
    except DocumentAIError as e:
        raise _ai_failure("OCR", filename, e) from e


@router.post("/extract-tables", response_model=TableExtraction)
async def extract_tables(
    file: UploadFile,
    service: DocumentAIService = Depends(document_ai_service),
) -> TableExtraction:
    filename, content = await read_pdf_upload(file)
    try:
        return await service.extract_tables(content)
    except DocumentAIError as e:
        raise _ai_failure("Table extraction", filename, e) from e


@router.post("/summarize", response_model=Summary)
async def summarize(
    file: UploadFile,
    service: DocumentAIService = Depends(document_ai_service),
) -> Summary:
    filename, content = await read_pdf_upload(file)
    try:
        return await service.summarize_pdf(content)
    except DocumentAIError as e:
        raise _ai_failure("Summarization", filename, e) from e
